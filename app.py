#!/usr/bin/env python3
"""
Voxel Canvas Web Interface

A simple Gradio-based web UI for rendering procedural voxel shapes as
isometric pixel art.

Run with: python app.py
Then open http://localhost:7860 in your browser
"""

import sys
from pathlib import Path
import tempfile

# Add src to path
sys.path.insert(0, str(Path(__file__).parent / "src"))

import gradio as gr
from voxel_canvas import RenderSettings, SceneBuilder, ImageTarget, parse_color


def render_shape(
    shape: str,
    width: int,
    height: int,
    depth: int,
    color: str,
    background: str,
    transparent: bool,
    geom_width: int,
    top_height: int,
    bottom_height: int,
    scale: int
):
    """
    Render a shape and return the preview image, stats text and PNG path.
    """
    try:
        settings = RenderSettings(
            geom_width=int(geom_width),
            top_height=int(top_height),
            bottom_height=int(bottom_height),
            voxel_color=parse_color(color),
            background=parse_color(background),
            transparent_background=transparent,
            scale=int(scale),
        )
        target = ImageTarget(scale=settings.scale)
        builder = SceneBuilder(
            settings.geometry(),
            settings.palette(),
            target_factory=lambda: target
        )
        surface = builder.render(
            shape.lower(),
            int(width),
            int(height),
            int(depth),
            transparent_background=settings.transparent_background
        )
    except ValueError as e:
        return None, f"**Error:** {e}", None

    image = target.present(surface)

    stats_text = f"""## Render Complete!

| Metric | Value |
|--------|-------|
| Grid Size | {surface.width} x {surface.height} x {surface.depth} |
| Voxel Count | {surface.voxel_count:,} |
| Image Size | {surface.pixel_buffer_width} x {surface.pixel_buffer_height} pixels |

**Settings:** {shape}, Geometry={settings.geom_width}x{settings.top_height}+{settings.bottom_height}, Scale={settings.scale}
"""

    export_dir = tempfile.mkdtemp(prefix="voxel_")
    png_path = str(target.save(surface, Path(export_dir) / f"{shape.lower()}.png"))

    return image, stats_text, png_path


# Build the Gradio interface
with gr.Blocks(title="Voxel Canvas") as app:

    gr.Markdown("""
    # Voxel Canvas
    ### Render Voxel Shapes as Isometric Pixel Art

    Pick a shape, adjust the grid and colors, and download the PNG!
    """)

    with gr.Row():
        # Left column - Settings
        with gr.Column(scale=1):
            gr.Markdown("### Shape")

            shape = gr.Dropdown(
                choices=["Cube", "Pyramid", "Ellipsoid"],
                value="Pyramid",
                label="Shape"
            )

            width = gr.Slider(minimum=1, maximum=64, value=9, step=1, label="Width (x)")
            height = gr.Slider(minimum=1, maximum=64, value=5, step=1, label="Height (y)")
            depth = gr.Slider(minimum=1, maximum=64, value=9, step=1, label="Depth (z)")

            gr.Markdown("### Colors")

            color = gr.ColorPicker(value="#edc9af", label="Voxel Color")
            background = gr.ColorPicker(value="#000000", label="Background")
            transparent = gr.Checkbox(value=True, label="Transparent Background")

            gr.Markdown("### Voxel Footprint")
            with gr.Row():
                geom_width = gr.Slider(minimum=2, maximum=16, value=4, step=2, label="Width")
                top_height = gr.Slider(minimum=0, maximum=8, value=1, step=1, label="Top")
                bottom_height = gr.Slider(minimum=0, maximum=8, value=2, step=1, label="Bottom")

            scale = gr.Slider(minimum=1, maximum=16, value=4, step=1, label="Output Scale")

            render_btn = gr.Button("Render", variant="primary")

        # Right column - Preview and download
        with gr.Column(scale=2):
            gr.Markdown("### Preview")

            preview = gr.Image(label="Rendered Image", type="pil", image_mode="RGBA")

            stats_output = gr.Markdown(
                value="Pick a shape and click 'Render' to see results."
            )

            png_output = gr.File(label="PNG")

    # Wire up events
    render_btn.click(
        fn=render_shape,
        inputs=[
            shape,
            width,
            height,
            depth,
            color,
            background,
            transparent,
            geom_width,
            top_height,
            bottom_height,
            scale
        ],
        outputs=[preview, stats_output, png_output]
    )


if __name__ == "__main__":
    print("\n" + "="*60)
    print("Voxel Canvas Web Interface")
    print("="*60)
    print("\nStarting server...")
    print("Open http://localhost:7860 in your browser\n")

    app.launch(
        server_name="0.0.0.0",
        server_port=7860,
        share=False
    )
