"""SVG drawing surface for rendered frames."""

from html import escape

from service.tempchart.models import Circle, Frame, Line, Primitive, Text

_TEXT_ANCHOR = {
    "left": "start",
    "center": "middle",
}

_BASELINE = {
    "middle": "middle",
    "top": "hanging",
}


def _num(x: float) -> str:
    """Formats a coordinate with at most two decimals."""
    s = f"{x:.2f}".rstrip("0").rstrip(".")
    return "0" if s == "-0" else s


def _line(p: Line) -> str:
    attrs = [
        f'x1="{_num(p.x1)}" y1="{_num(p.y1)}" x2="{_num(p.x2)}" y2="{_num(p.y2)}"',
        f'stroke="{p.color}" stroke-width="{_num(p.width)}"',
    ]
    if p.dash:
        attrs.append(f'stroke-dasharray="{",".join(_num(d) for d in p.dash)}"')
    if p.tag:
        attrs.append(f'class="{p.tag}"')
    return f"<line {' '.join(attrs)}/>"


def _circle(p: Circle) -> str:
    attrs = [
        f'cx="{_num(p.cx)}" cy="{_num(p.cy)}" r="{_num(p.r)}"',
        f'fill="{p.fill}" stroke="{p.stroke}" stroke-width="{_num(p.stroke_width)}"',
    ]
    if p.tag:
        attrs.append(f'class="{p.tag}"')
    return f"<circle {' '.join(attrs)}/>"


def _text(p: Text) -> str:
    attrs = [
        f'x="{_num(p.x)}" y="{_num(p.y)}"',
        f'fill="{p.color}" font-size="{p.font_size}" font-family="sans-serif"',
        f'text-anchor="{_TEXT_ANCHOR.get(p.align, "start")}"',
        f'dominant-baseline="{_BASELINE.get(p.baseline, "middle")}"',
    ]
    if p.tag:
        attrs.append(f'class="{p.tag}"')
    return f"<text {' '.join(attrs)}>{escape(p.text)}</text>"


def primitive_to_svg(p: Primitive) -> str:
    if isinstance(p, Line):
        return _line(p)
    elif isinstance(p, Circle):
        return _circle(p)
    elif isinstance(p, Text):
        return _text(p)
    raise ValueError(f"Unsupported primitive: {p!r}")


def frame_to_svg(frame: Frame, width: float, height: float) -> str:
    """Returns a standalone SVG document drawing all primitives of frame."""
    lines = [
        f'<svg xmlns="http://www.w3.org/2000/svg" width="{_num(width)}" '
        f'height="{_num(height)}" viewBox="0 0 {_num(width)} {_num(height)}">'
    ]
    lines.extend(primitive_to_svg(p) for p in frame.primitives)
    lines.append("</svg>")
    return "\n".join(lines)
