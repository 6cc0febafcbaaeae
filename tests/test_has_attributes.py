"""Tests for the schema-driven attribute guards and setters."""
from __future__ import annotations

from datetime import date

from tests.mock_model import MockModel, Widget


class TestSchemaStructure:
    """Reading the declared schema back from a model."""

    def test_valid_attributes_follow_schema_order(self, model: MockModel) -> None:
        assert model.get_valid_attributes() == list(MockModel.__schema__.keys())

    def test_is_valid_attribute(self, model: MockModel) -> None:
        assert model.is_valid_attribute('name')
        assert not model.is_valid_attribute('nickname')

    def test_entry_lists(self, model: MockModel) -> None:
        assert model.get_guarded() == ['id', 'uuid', 'created_at', 'updated_at']
        assert model.get_fillable() == ['name']
        assert model.get_hidden() == ['created_at', 'updated_at', 'deleted_at']

    def test_entry_with_value_includes_falsy_values(self, model: MockModel) -> None:
        defaults = model.get_attributes_from_structure('default', True)

        assert defaults == {
            'is_alive': True,
            'enable_notifications': False,
            'is_admin': False,
            'preferences': {},
        }

    def test_get_auths(self, model: MockModel) -> None:
        assert model.get_auths() == {'enable_notifications': 'check_role'}

    def test_mutator_lookups(self, model: MockModel) -> None:
        assert model.has_set_mutator('name')
        assert not model.has_set_mutator('score')
        assert model.has_auth_attribute_mutator('is_admin')
        assert not model.has_auth_attribute_mutator('is_alive')

    def test_schema_auth_is_not_a_convention_mutator(self, model: MockModel) -> None:
        assert model.get_auth_method('enable_notifications') is MockModel.check_role
        assert not model.has_auth_attribute_mutator('enable_notifications')


class TestWriteAccess:
    """Guarded and authorized attribute writes."""

    def test_guarded_attribute_is_dropped(self, model: MockModel) -> None:
        model.created_at = '2024-01-01 00:00:00'

        assert model.read_attribute('created_at') is None

    def test_assign_attribute_reports_refusal(self, model: MockModel) -> None:
        assert model.assign_attribute('uuid', 'abc') is False
        assert model.assign_attribute('score', 1.5) is True
        assert model.read_attribute('score') == 1.5

    def test_unknown_attribute_is_refused(self, model: MockModel) -> None:
        assert model.assign_attribute('nickname', 'JD') is False

    def test_unguarded_write_bypasses_guard(self, model: MockModel) -> None:
        assert model.assign_attribute('created_at', '2024-01-01 10:00:00', unguarded=True)

        assert model.read_attribute('created_at') == '2024-01-01 10:00:00'

    def test_unguarded_write_bypasses_auth(self, model: MockModel) -> None:
        assert model.has_write_access('is_admin', unguarded=True)
        assert not model.has_write_access('is_admin')

    def test_auth_convention_method_blocks_write(self, model: MockModel) -> None:
        model.is_admin = True

        assert model.read_attribute('is_admin') is None

    def test_schema_auth_method_blocks_write(self, model: MockModel) -> None:
        model.enable_notifications = True

        assert model.read_attribute('enable_notifications') is None

    def test_refused_write_keeps_prior_value(self, model: MockModel) -> None:
        model.force_fill({'is_admin': False})
        model.is_admin = True

        assert model.read_attribute('is_admin') is False

    def test_unrestricted_attribute_is_written(self, model: MockModel) -> None:
        model.is_alive = False

        assert model.read_attribute('is_alive') is False

    def test_callable_auth_from_schema(self) -> None:
        widget = Widget(sku='ab-1')

        widget.locked = True
        assert widget.get_attribute('locked') is True

        widget.locked = False
        assert widget.get_attribute('locked') is True


class TestMassAssignment:
    def test_constructor_only_sets_fillable_attributes(self) -> None:
        model = MockModel(name='Jane', score=3.0)

        assert model.read_attribute('name') == 'Jane'
        assert model.read_attribute('score') is None

    def test_everything_but_guarded_is_fillable_without_fillable_list(self) -> None:
        widget = Widget(sku='ab-1', price='9.99')

        assert widget.read_attribute('sku') == 'ab-1'
        assert widget.read_attribute('price') == '9.99'

    def test_force_fill_ignores_guards(self, model: MockModel) -> None:
        model.force_fill({'uuid': '0b0e8ad2-6b39-4e58-9d8c-27a3a5c5f2a4', 'is_admin': True})

        assert model.read_attribute('uuid') == '0b0e8ad2-6b39-4e58-9d8c-27a3a5c5f2a4'
        assert model.read_attribute('is_admin') is True

    def test_to_dict_omits_hidden_attributes(self) -> None:
        model = MockModel(name='Jane')
        model.is_alive = True

        data = model.to_dict()

        assert data['name'] == 'Jane'
        assert data['is_alive'] is True
        assert 'created_at' not in data
        assert 'deleted_at' not in data


class TestSetAttribute:
    """set_attribute() routing."""

    def test_set_mutator_takes_precedence(self, model: MockModel) -> None:
        model.name = '  Jane Doe  '

        assert model.read_attribute('name') == 'Jane Doe'

    def test_storage_cast_is_applied(self, model: MockModel) -> None:
        model.set_attribute('born_on', date(2024, 2, 29))
        model.set_attribute('preferences', {'theme': 'dark'})

        assert model.read_attribute('born_on') == '2024-02-29'
        assert model.read_attribute('preferences') == '{"theme": "dark"}'

    def test_attribute_without_storage_cast_is_stored_as_given(self, model: MockModel) -> None:
        model.set_attribute('score', '4.5')

        assert model.read_attribute('score') == '4.5'

    def test_json_path_updates_nested_value(self, model: MockModel) -> None:
        model.set_attribute('preferences->theme', 'dark')
        model.set_attribute('preferences->layout->columns', 2)

        assert model.get_attribute('preferences') == {
            'theme': 'dark',
            'layout': {'columns': 2},
        }

    def test_dotted_path_keeps_existing_keys(self, model: MockModel) -> None:
        model.set_attribute('preferences', {'theme': 'dark'})
        model.set_attribute('preferences.language', 'en')

        assert model.get_attribute('preferences') == {'theme': 'dark', 'language': 'en'}
