from PySide6.QtCore import QSettings, Signal

# Defaults for settings that are accessed from multiple places.
DEFAULT_SETTINGS = {
    'masonry_num_columns': 2,
    'masonry_cell_padding': 6.0,
    # Used when the height provider is missing or has no answer for an item
    'masonry_default_item_height': 180.0,
    'masonry_placement': 'round_robin',  # round_robin (stable) or shortest_column
}


class Settings(QSettings):
    # Signal that shows that the setting with the given string was changes
    change = Signal(str, object, name='settingsChanged')

    def __init__(self):
        super().__init__('pinboard', 'pinboard')

    def setValue(self, key, value):
        super().setValue(key, value)
        self.change.emit(key, value)

# Common shared instance to ensure the Signal is also shared
settings = Settings()


def get_masonry_settings(settings_store=None) -> dict:
    """Read the masonry layout configuration with typed defaults."""
    store = settings if settings_store is None else settings_store
    return {
        'num_columns': store.value(
            'masonry_num_columns',
            defaultValue=DEFAULT_SETTINGS['masonry_num_columns'], type=int),
        'cell_padding': store.value(
            'masonry_cell_padding',
            defaultValue=DEFAULT_SETTINGS['masonry_cell_padding'], type=float),
        'default_item_height': store.value(
            'masonry_default_item_height',
            defaultValue=DEFAULT_SETTINGS['masonry_default_item_height'],
            type=float),
        'placement': store.value(
            'masonry_placement',
            defaultValue=DEFAULT_SETTINGS['masonry_placement'], type=str),
    }
