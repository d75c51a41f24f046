"""Qt-free masonry layout pass.

Kept free of PySide6 so a host can run it off the UI thread or in a
separate process and hand the plain dict back to the layout.
"""

from dataclasses import dataclass, asdict

ROUND_ROBIN = 'round_robin'
SHORTEST_COLUMN = 'shortest_column'
PLACEMENTS = (ROUND_ROBIN, SHORTEST_COLUMN)


@dataclass
class PositionedItem:
    """Padded frame of one item after a layout pass."""
    index: int
    column: int
    x: float
    y: float
    width: float
    height: float


def calculate_masonry_layout(heights, content_width, num_columns, cell_padding,
                             placement=ROUND_ROBIN):
    """
    Place every item into a column and compute its padded frame.

    Args:
        heights: Intrinsic (unpadded) height per item, in index order
        content_width: Width available to all columns together
        num_columns: Number of equal-width columns
        cell_padding: Inset applied on every side of an item's slot
        placement: 'round_robin' (item i goes to column i % num_columns)
            or 'shortest_column'

    Returns:
        dict with 'items' (list of positioned items), 'content_width'
        and 'total_height'
    """
    if placement not in PLACEMENTS:
        raise ValueError(f"Unknown placement: {placement!r}")

    column_width = content_width / num_columns
    if heights and column_width < 2 * cell_padding:
        raise ValueError(
            f"Column width {column_width} is smaller than twice the cell "
            f"padding {cell_padding}")
    y_offsets = [0.0] * num_columns
    total_height = 0.0
    positioned_items = []

    for index, photo_height in enumerate(heights):
        if placement == ROUND_ROBIN:
            column = index % num_columns
        else:
            # Ties go to the lowest column index
            column = min(range(num_columns), key=lambda c: y_offsets[c])

        slot_height = photo_height + 2 * cell_padding
        slot_x = column * column_width
        slot_y = y_offsets[column]

        positioned_items.append(PositionedItem(
            index=index,
            column=column,
            x=slot_x + cell_padding,
            y=slot_y + cell_padding,
            width=column_width - 2 * cell_padding,
            height=photo_height,
        ))

        # Content height tracks slot frames, not padded frames
        total_height = max(total_height, slot_y + slot_height)
        y_offsets[column] += slot_height

    return {
        'items': [asdict(item) for item in positioned_items],
        'content_width': content_width,
        'total_height': total_height,
    }
