import pytest

from overlay.models import Canvas, StyleBlock, TextBox
from overlay.panels import panel, panel_svg


def _block(**kwargs) -> StyleBlock:
    values = {
        "text": "Sale",
        "background_type": "solid",
        "background_color_hex": "#000000",
        "background_padding": 20,
    }
    values.update(kwargs)
    return StyleBlock(**values)


def _box(x=540.0, y=600.0) -> TextBox:
    return TextBox(x=x, y=y, width=300, height=60, line_height=60)


def test_panel_sized_around_text():
    item = panel(_box(), _block(), Canvas(1080, 1080))

    assert item.width == pytest.approx(340)
    assert item.height == pytest.approx(100)


def test_panel_width_capped_by_canvas():
    item = panel(_box(x=150, y=150), _block(), Canvas(300, 300))

    assert item.width == pytest.approx(270)
    assert item.height == pytest.approx(100)


@pytest.mark.parametrize(
    "kwargs",
    [{"background_type": "none"}, {"background_color_hex": None}, {"background_color_hex": ""}],
)
def test_no_panel_without_background(kwargs):
    assert panel(_box(), _block(**kwargs), Canvas(1080, 1080)) is None


def test_panel_centred_on_text_box():
    item = panel(_box(), _block(), Canvas(1080, 1080))

    # Text top is one line above the 600px baseline, so its centre is at 570.
    assert item.x == pytest.approx(540 - 170)
    assert item.y == pytest.approx(570 - 50)
    assert item.center == pytest.approx((540, 570))


def test_panel_follows_anchor():
    canvas = Canvas(1080, 1080)
    start = panel(_box(x=200), _block(text_anchor="start"), canvas)
    end = panel(_box(x=900), _block(text_anchor="end"), canvas)

    assert start.x == pytest.approx(180)
    assert end.x + end.width == pytest.approx(920)


def test_panel_clamped_into_margin():
    canvas = Canvas(1080, 1080)
    item = panel(_box(x=10, y=40), _block(text_anchor="start"), canvas)

    assert item.x == pytest.approx(canvas.padding)
    assert item.y == pytest.approx(canvas.padding)


@pytest.mark.parametrize(
    "shape, radius",
    [("rectangle", 0), ("rounded", 12), ("pill", 50), ("circle", 50)],
)
def test_shape_radius(shape, radius):
    item = panel(_box(), _block(background_shape=shape), Canvas(1080, 1080))

    assert item.radius == pytest.approx(radius)


def test_gradient_runs_from_80_percent_to_full_opacity():
    item = panel(_box(), _block(background_type="gradient", background_opacity=0.6), Canvas(1080, 1080))
    defs, element, filter_id = panel_svg(item, "title-panel")

    assert filter_id is None
    assert len(defs) == 1
    assert 'id="title-panel-gradient"' in defs[0]
    assert 'stop-opacity="0.48"' in defs[0]
    assert 'stop-opacity="0.6"' in defs[0]
    assert 'fill="url(#title-panel-gradient)"' in element


def test_blur_panel_declares_filter():
    item = panel(_box(), _block(background_type="blur"), Canvas(1080, 1080))
    defs, element, filter_id = panel_svg(item, "subtitle-panel")

    assert filter_id == "subtitle-panel-blur"
    assert any('stdDeviation="10"' in entry for entry in defs)
    assert "filter=" not in element
    assert item.blur == 10


def test_circle_and_rect_elements():
    canvas = Canvas(1080, 1080)
    _, circle, _ = panel_svg(panel(_box(), _block(background_shape="circle"), canvas), "t")
    _, pill, _ = panel_svg(panel(_box(), _block(background_shape="pill"), canvas), "t")

    assert circle.startswith('<circle cx="540" cy="570" r="50"')
    assert pill.startswith('<rect x="370" y="520" width="340" height="100" rx="50" ry="50"')
    assert 'fill="#000000" fill-opacity="0.6"' in pill
