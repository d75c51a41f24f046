"""Masonry layout calculator for the pinboard grid."""

import logging
import math
from dataclasses import dataclass
from typing import Optional, Protocol

from PySide6.QtCore import QMarginsF, QRectF, QSizeF

from pinboard.utils.settings import get_masonry_settings
from pinboard.widgets.masonry_worker import (PLACEMENTS, ROUND_ROBIN,
                                             calculate_masonry_layout)

logger = logging.getLogger(__name__)


class HeightProvider(Protocol):
    """Supplies the intrinsic (unpadded) height of an item.

    Returning None means "no answer" and the layout's default height is
    used instead.
    """

    def __call__(self, index: int) -> Optional[float]:
        ...


@dataclass
class MasonryItem:
    """Represents a positioned item in the masonry layout."""
    index: int
    rect: QRectF


@dataclass(frozen=True)
class LayoutContext:
    """Inputs of the last layout pass."""
    item_count: int
    available_width: float
    left_inset: float
    top_inset: float
    right_inset: float
    bottom_inset: float

    @classmethod
    def create(cls, item_count: int, available_width: float,
               insets: QMarginsF) -> 'LayoutContext':
        return cls(item_count=item_count,
                   available_width=float(available_width),
                   left_inset=insets.left(),
                   top_inset=insets.top(),
                   right_inset=insets.right(),
                   bottom_inset=insets.bottom())


class MasonryLayout:
    """Calculates masonry (Pinterest-style) frames for a flat item list.

    Items are placed into equal-width columns. By default item i always
    goes to column i % num_columns; the 'shortest_column' placement must
    be requested explicitly.

    The layout has two states. It is EMPTY until a pass has produced
    frames and READY afterwards. Only `invalidate()` goes back to EMPTY,
    the layout never notices width or item count changes by itself.
    Not thread safe: confine an instance to the thread that owns the view.
    """

    DEFAULT_ITEM_HEIGHT = 180.0

    def __init__(self, num_columns: int = 2, cell_padding: float = 6.0,
                 height_provider: Optional[HeightProvider] = None,
                 default_item_height: float = DEFAULT_ITEM_HEIGHT,
                 placement: str = ROUND_ROBIN):
        """
        Initialize masonry layout calculator.

        Args:
            num_columns: Number of equal-width columns (at least 1)
            cell_padding: Inset applied on every side of each item's slot
            height_provider: Callable returning an item's height, or None
            default_item_height: Height used when the provider has no answer
            placement: 'round_robin' or 'shortest_column'

        Raises:
            ValueError: If the configuration would produce degenerate
                geometry
        """
        if num_columns < 1:
            raise ValueError(f"num_columns must be >= 1, got {num_columns}")
        if cell_padding < 0:
            raise ValueError(f"cell_padding must be >= 0, got {cell_padding}")
        if default_item_height <= 0:
            raise ValueError(
                f"default_item_height must be > 0, got {default_item_height}")
        if placement not in PLACEMENTS:
            raise ValueError(f"Unknown placement: {placement!r}")

        self._num_columns = int(num_columns)
        self._cell_padding = float(cell_padding)
        self._default_item_height = float(default_item_height)
        self._placement = placement
        self.height_provider = height_provider

        self._cache: list[QRectF] = []
        self._columns: list[int] = []
        self._content_size = QSizeF(0, 0)
        self._context: Optional[LayoutContext] = None

    @classmethod
    def from_settings(cls, settings_store=None,
                      height_provider: Optional[HeightProvider] = None
                      ) -> 'MasonryLayout':
        """Create a layout configured from the persisted settings."""
        config = get_masonry_settings(settings_store)
        return cls(height_provider=height_provider, **config)

    @property
    def num_columns(self) -> int:
        return self._num_columns

    @property
    def cell_padding(self) -> float:
        return self._cell_padding

    @property
    def default_item_height(self) -> float:
        return self._default_item_height

    @property
    def placement(self) -> str:
        return self._placement

    @property
    def is_ready(self) -> bool:
        return bool(self._cache)

    @property
    def item_count(self) -> int:
        return len(self._cache)

    def invalidate(self):
        """Drop the cached frames so the next `prepare()` recomputes."""
        self._cache = []
        self._columns = []
        self._content_size = QSizeF(0, 0)
        self._context = None

    def should_invalidate(self, item_count: int, available_width: float,
                          insets: Optional[QMarginsF] = None) -> bool:
        """Whether the cached frames were computed for different inputs."""
        if not self.is_ready:
            return False
        insets = QMarginsF() if insets is None else insets
        return self._context != LayoutContext.create(
            item_count, available_width, insets)

    def prepare(self, item_count: int, available_width: float,
                insets: Optional[QMarginsF] = None) -> bool:
        """
        Lay out the items unless cached frames are already available.

        A non-empty cache is trusted as is; call `invalidate()` first when
        the item count, width or insets have changed.

        Returns:
            True if a layout pass ran, False if the cache was reused
        """
        if self._cache:
            return False
        self.compute_layout(item_count, available_width, insets)
        return True

    def compute_layout(self, item_count: int, available_width: float,
                       insets: Optional[QMarginsF] = None
                       ) -> tuple[list[QRectF], QSizeF]:
        """
        Recompute the frame of every item from scratch.

        The height provider is asked exactly once per item. Only the left
        and right insets are taken into account; the content height never
        includes vertical insets.

        Args:
            item_count: Number of items in the list
            available_width: Width of the viewport
            insets: Content insets of the viewport

        Returns:
            Tuple of (padded frames in index order, content size)
        """
        insets = QMarginsF() if insets is None else insets
        if item_count < 0:
            raise ValueError(f"item_count must be >= 0, got {item_count}")
        if available_width < 0:
            raise ValueError(
                f"available_width must be >= 0, got {available_width}")
        content_width = available_width - (insets.left() + insets.right())
        if content_width < 0:
            raise ValueError(
                f"Horizontal insets ({insets.left()}, {insets.right()}) exceed "
                f"the available width {available_width}")
        column_width = content_width / self._num_columns
        if item_count and column_width < 2 * self._cell_padding:
            raise ValueError(
                f"Column width {column_width} is smaller than twice the cell "
                f"padding {self._cell_padding}")

        # A failed pass leaves the layout EMPTY rather than stale
        self.invalidate()

        if self.height_provider is None and item_count:
            logger.debug("No height provider, using default height %s for "
                         "all %d items", self._default_item_height, item_count)
        heights = [self._height_for_item(index) for index in range(item_count)]
        result = calculate_masonry_layout(
            heights, content_width, self._num_columns, self._cell_padding,
            self._placement)

        cache = [QRectF(item['x'], item['y'], item['width'], item['height'])
                 for item in result['items']]
        columns = [item['column'] for item in result['items']]
        content_size = QSizeF(content_width, result['total_height'])

        self._cache = cache
        self._columns = columns
        self._content_size = content_size
        self._context = LayoutContext.create(item_count, available_width,
                                             insets)

        logger.debug("Masonry pass: %d items, %d columns, content %sx%s",
                     item_count, self._num_columns, content_size.width(),
                     content_size.height())
        return [QRectF(rect) for rect in cache], QSizeF(content_size)

    def _height_for_item(self, index: int) -> float:
        if self.height_provider is None:
            return self._default_item_height
        height = self.height_provider(index)
        if height is None:
            logger.debug("No height for item %d, using default %s", index,
                         self._default_item_height)
            return self._default_item_height
        if not math.isfinite(height) or height < 0:
            raise ValueError(
                f"Height provider returned {height} for item {index}")
        return float(height)

    def _check_index(self, index: int):
        if not 0 <= index < len(self._cache):
            raise IndexError(
                f"Item index {index} out of range, {len(self._cache)} items "
                f"laid out")

    def frame_for_item(self, index: int) -> QRectF:
        """
        Get the padded frame of an item.

        Asking for an index that was not laid out is a programming error,
        including any index before the first pass.

        Raises:
            IndexError: If index is outside the laid out items
        """
        self._check_index(index)
        return QRectF(self._cache[index])

    def column_for_item(self, index: int) -> int:
        """Get the column an item was placed into during the last pass."""
        self._check_index(index)
        return self._columns[index]

    def visible_frames(self, viewport_rect: QRectF) -> list[MasonryItem]:
        """
        Get items whose frame overlaps the given rectangle.

        Frames that only touch the rectangle's edge are not included.

        Args:
            viewport_rect: The visible area in content coordinates (QRect
                or QRectF)

        Returns:
            List of MasonryItem objects in index order, empty before the
            first pass
        """
        viewport_rect = QRectF(viewport_rect)
        visible = []
        for index, rect in enumerate(self._cache):
            if rect.intersects(viewport_rect):
                visible.append(MasonryItem(index=index, rect=QRectF(rect)))
        return visible

    def content_size(self) -> QSizeF:
        """Get the total size needed for the layout."""
        return QSizeF(self._content_size)
