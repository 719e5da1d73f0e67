"""Known design-vocabulary tokens used by the greedy name splitter."""

MAX_WORD_LENGTH = 12
MIN_WORD_LENGTH = 2

_COMPONENTS = """
icon button btn input text label card modal dialog menu dropdown select
checkbox radio toggle switch slider progress spinner loader avatar badge
chip tag tooltip popover toast alert banner header footer nav sidebar tab
panel accordion list item row col grid container wrapper box frame group
stack divider separator image img link anchor form field table cell section
"""

_STATES = """
hover active focus disabled selected checked pressed loading error success
warning info primary secondary tertiary default outline ghost filled empty
open closed expanded collapsed
"""

_SIZES = """
xs sm md lg xl xxl small medium large tiny mini big huge
"""

_COLORS = """
bg background fg foreground fill stroke border color dark light white black
gray grey red blue green yellow orange purple pink cyan teal indigo violet
brand accent
"""

_POSITIONS = """
top bottom left right center start end leading trailing inner outer middle
horizontal vertical north south east west
"""

_ACTIONS = """
add edit delete remove save cancel close show hide expand collapse copy
paste search filter sort refresh sync upload download submit reset clear
undo redo back next prev
"""

_NAMING = """
main sub base root app page view screen component element widget control
action content title subtitle description body name value
"""

COMMON_WORDS = frozenset(
    word
    for block in (
        _COMPONENTS,
        _STATES,
        _SIZES,
        _COLORS,
        _POSITIONS,
        _ACTIONS,
        _NAMING,
    )
    for word in block.split()
)
