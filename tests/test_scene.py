from overlay.config import OverlaySettings
from overlay.models import Canvas, StyleBlock
from overlay.scene import build_scene


CANVAS = Canvas(1080, 1080)


def _panel_block(text: str, **kwargs) -> StyleBlock:
    return StyleBlock(
        text=text,
        background_type="solid",
        background_color_hex="#000000",
        **kwargs,
    )


def test_layers_put_both_panels_under_both_texts():
    scene = build_scene(
        CANVAS,
        title=_panel_block("Title", y_percent=30),
        subtitle=_panel_block("Subtitle", y_percent=70),
    )

    assert [layer.name for layer in scene.layers] == [
        "title-panel",
        "subtitle-panel",
        "title-text",
        "subtitle-text",
    ]
    svg = scene.to_svg()
    assert svg.index("<rect") < svg.index("<text")
    assert svg.index("<defs>") < svg.index("<rect")


def test_single_shadow_filter_shared_by_all_text():
    scene = build_scene(CANVAS, title=StyleBlock(text="A"), subtitle=StyleBlock(text="B", y_percent=80))
    svg = scene.to_svg()

    assert svg.count('id="textShadow"') == 1
    assert svg.count('filter="url(#textShadow)"') == 2
    assert 'stdDeviation="3"' in svg
    assert 'dx="2" dy="2"' in svg
    assert 'slope="0.6"' in svg
    assert 'filter="url(' not in scene.to_svg(filters=False)


def test_text_is_escaped():
    scene = build_scene(CANVAS, title=StyleBlock(text="Fish & <Chips> \"'", font_size_px=40))

    assert "Fish &amp; &lt;Chips&gt; &quot;&apos;" in scene.to_svg()


def test_fonts_resolved_per_block():
    settings = OverlaySettings()
    scene = build_scene(
        CANVAS,
        title=StyleBlock(text="Title", font_family="cursive", font_weight="bold", letter_spacing="wide"),
        subtitle=StyleBlock(text="Subtitle", font_family="sans-serif", font_weight="light", y_percent=80),
        settings=settings,
    )
    title_layer, subtitle_layer = scene.layers

    title_svg = title_layer.to_svg()
    assert f'font-family="{settings.serif_fonts}"' in title_svg
    assert 'font-weight="700"' in title_svg
    assert 'letter-spacing="0.15em"' in title_svg

    subtitle_svg = subtitle_layer.to_svg()
    assert f'font-family="{settings.sans_serif_fonts}"' in subtitle_svg
    assert 'font-weight="300"' in subtitle_svg
    assert "letter-spacing" not in subtitle_svg


def test_subtitle_opacity_factor_is_configurable():
    blocks = dict(title=StyleBlock(text="Title"), subtitle=StyleBlock(text="Sub", y_percent=80))

    plain = build_scene(CANVAS, **blocks)
    dimmed = build_scene(CANVAS, settings=OverlaySettings(subtitle_opacity_factor=0.9), **blocks)

    assert 'opacity="1"' in plain.layers[1].to_svg()
    assert 'opacity="0.9"' in dimmed.layers[1].to_svg()
    assert 'opacity="1"' in dimmed.layers[0].to_svg()


def test_title_layout_ignores_subtitle():
    title = StyleBlock(text="Summer Sale", y_percent=30)

    alone = build_scene(CANVAS, title=title)
    paired = build_scene(CANVAS, title=title, subtitle=StyleBlock(text="Up to 50% off", y_percent=80))

    assert alone.blocks["title"].box == paired.blocks["title"].box


def test_empty_block_is_skipped():
    scene = build_scene(CANVAS, title=StyleBlock(text="   "), subtitle=StyleBlock(text="Sub"))

    assert list(scene.blocks) == ["subtitle"]
    assert [layer.name for layer in scene.layers] == ["subtitle-text"]


def test_summer_sale_scenario():
    scene = build_scene(
        CANVAS,
        title=StyleBlock(
            text="Summer Sale",
            text_transform="uppercase",
            font_weight="bold",
            x_percent=50,
            y_percent=30,
        ),
        subtitle=StyleBlock(text="Up to 50% off", x_percent=50, y_percent=80),
    )
    title = scene.blocks["title"]
    subtitle = scene.blocks["subtitle"]

    assert [line.text for line in title.box.lines] == ["SUMMER SALE"]
    assert title.font_size_px == 108
    assert subtitle.font_size_px == 64

    assert title.box.center_y < CANVAS.height / 3
    assert subtitle.box.center_y > CANVAS.height * 0.75
    assert title.box.top + title.box.height < subtitle.box.top

    for placed in (title, subtitle):
        box = placed.box
        assert box.x - box.width / 2 >= CANVAS.padding
        assert box.x + box.width / 2 <= CANVAS.width - CANVAS.padding
        assert box.top >= CANVAS.padding
        assert box.top + box.height <= CANVAS.height - CANVAS.padding
    assert 'fill="#FFFFFF"' in scene.to_svg()


def test_blank_preset_lines_fall_back_to_wrapping():
    scene = build_scene(CANVAS, title=StyleBlock(text="Big Sale", lines=["", "  "]))

    assert [line.text for line in scene.blocks["title"].box.lines] == ["Big Sale"]
