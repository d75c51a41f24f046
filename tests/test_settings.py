from pinboard.utils.settings import DEFAULT_SETTINGS, get_masonry_settings


class FakeSettingsStore:
    def __init__(self, values=None):
        self._values = values or {}
        self.requested = []

    def value(self, key, defaultValue=None, type=None):
        self.requested.append(key)
        value = self._values.get(key, defaultValue)
        return type(value) if type is not None else value


def test_masonry_settings_fall_back_to_defaults():
    store = FakeSettingsStore()

    config = get_masonry_settings(store)

    assert config == {
        'num_columns': DEFAULT_SETTINGS['masonry_num_columns'],
        'cell_padding': DEFAULT_SETTINGS['masonry_cell_padding'],
        'default_item_height': DEFAULT_SETTINGS['masonry_default_item_height'],
        'placement': 'round_robin',
    }
    assert config['num_columns'] == 2
    assert config['cell_padding'] == 6.0
    assert config['default_item_height'] == 180.0


def test_masonry_settings_apply_stored_types():
    store = FakeSettingsStore({'masonry_num_columns': '4',
                               'masonry_cell_padding': '2.5'})

    config = get_masonry_settings(store)

    assert config['num_columns'] == 4
    assert config['cell_padding'] == 2.5
    assert set(store.requested) == {
        'masonry_num_columns', 'masonry_cell_padding',
        'masonry_default_item_height', 'masonry_placement',
    }
