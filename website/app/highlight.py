"""Syntax highlighting palette: the Pygments source theme and its color remapping."""

from collections.abc import Sequence

from pygments.style import Style
from pygments.token import (
    Comment,
    Keyword,
    Name,
    Number,
    Operator,
    Punctuation,
    String,
    Text,
)

KEYWORD_COLOR = '#e35349'
STRING_COLOR = '#509c30'
FUNCTION_COLOR = '#239ecf'
VARIABLE_COLOR = '#7575ff'
COMMENT_COLOR = '#a8a8a8'
PUNCTUATION_COLOR = '#24292EFF'


class SourceThemeStyle(Style):
    """Pygments style emitting the source palette that COLOR_RULES rewrites.

    Code blocks are rendered with inline styles, so every token carries one of
    these literals in the served HTML.
    """

    name = 'source-theme'
    background_color = '#1E1E1E'

    styles = {
        Text: '#D4D4D4',
        Comment: 'italic #6A9955',
        Keyword: '#569CD6',
        Operator: '#D4D4D4',
        Punctuation: '#D4D4D4',
        Name: '#9CDCFE',
        Name.Variable: '#9CDCFE',
        Name.Attribute: '#9CDCFE',
        Name.Function: '#DCDCAA',
        Name.Class: '#4EC9B0',
        Name.Builtin: '#DCDCAA',
        String: '#CE9178',
        Number: '#B5CEA8',
    }


# Applied in order, each over the whole document. Later rules see the output of
# earlier ones: the second rule reintroduces #6F42C1, which the function rule
# below then rewrites.
COLOR_RULES: Sequence[tuple[str, str]] = (
    (
        '<span style="color: #6F42C1">.</span>',
        f'<span style="color: {PUNCTUATION_COLOR}">.</span>',
    ),
    (
        '<span style="color: #6F42C1">.',
        f'<span style="color: {PUNCTUATION_COLOR}">.</span><span style="color: #6F42C1">',
    ),
    ('#C2C3C5', COMMENT_COLOR),
    ('#22863A', STRING_COLOR),
    ('#6F42C1', FUNCTION_COLOR),
    ('#1976D2', VARIABLE_COLOR),
    ('#D32F2F', KEYWORD_COLOR),
    ('#6A9955', COMMENT_COLOR),
    ('#CE9178', STRING_COLOR),
    ('#DCDCAA', FUNCTION_COLOR),
    ('#9CDCFE', VARIABLE_COLOR),
    ('#569CD6', KEYWORD_COLOR),
)


def remap_colors(
    text: str, rules: Sequence[tuple[str, str]] = COLOR_RULES
) -> str:
    """Apply each (source, target) substitution to the text, in order."""
    for source, target in rules:
        text = text.replace(source, target)
    return text
