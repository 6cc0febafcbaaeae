"""Tests for the Validator and its rules."""
from __future__ import annotations

from typing import Any, List, Optional

import pytest

from model_attributes.Validation import MessageBag, ValidationException, ValidationRule, Validator, make_validator


class TestValidator:
    def test_passing_data(self) -> None:
        validator = Validator.make({'name': 'Jane', 'age': '30'}, {'name': 'required|string', 'age': 'integer'})

        assert validator.passes()
        assert validator.validated() == {'name': 'Jane', 'age': '30'}

    def test_required_field_missing(self) -> None:
        validator = Validator.make({}, {'name': 'required'})

        assert validator.fails()
        assert validator.errors().get('name') == ['The name field is required.']

    def test_errors_runs_validation(self) -> None:
        validator = make_validator({'email': 'nope'}, {'email': 'email'})

        assert validator.errors().first() == 'The email must be a valid email address.'

    def test_sometimes_skips_absent_fields(self) -> None:
        validator = Validator.make({}, {'name': 'sometimes|required|min:2'})

        assert validator.passes()

    def test_sometimes_checks_present_fields(self) -> None:
        validator = Validator.make({'name': 'J'}, {'name': 'sometimes|min:2'})

        assert validator.fails()

    def test_nullable_accepts_null(self) -> None:
        validator = Validator.make({'deleted_at': None}, {'deleted_at': 'date|nullable'})

        assert validator.passes()

    def test_optional_empty_value_is_skipped(self) -> None:
        validator = Validator.make({'score': None}, {'score': 'numeric'})

        assert validator.passes()

    def test_unknown_rules_are_ignored(self) -> None:
        validator = Validator.make({'price': '9.99'}, {'price': 'decimal|collection'})

        assert validator.passes()

    def test_rules_as_list(self) -> None:
        validator = Validator.make({'code': 'ab cd'}, {'code': ['required', 'alpha_dash']})

        assert validator.fails()

    def test_boolean_is_not_an_integer(self) -> None:
        validator = Validator.make({'count': True}, {'count': 'integer'})

        assert validator.fails()

    @pytest.mark.parametrize('value', [True, False, 1, 0, '1', 'false'])
    def test_boolean_rule_accepts(self, value: Any) -> None:
        assert Validator.make({'flag': value}, {'flag': 'boolean'}).passes()

    def test_array_rule_accepts_json_text(self) -> None:
        assert Validator.make({'tags': '["a"]'}, {'tags': 'array'}).passes()
        assert Validator.make({'tags': '{"a": 1}'}, {'tags': 'array'}).passes()
        assert Validator.make({'tags': 'a,b'}, {'tags': 'array'}).fails()

    def test_uuid_rule(self) -> None:
        assert Validator.make({'uuid': '0b0e8ad2-6b39-4e58-9d8c-27a3a5c5f2a4'}, {'uuid': 'uuid'}).passes()
        assert Validator.make({'uuid': 'not-a-uuid'}, {'uuid': 'uuid'}).fails()

    def test_date_rule_uses_storage_formats(self) -> None:
        assert Validator.make({'at': '2024-05-01 10:20:30'}, {'at': 'date'}).passes()
        assert Validator.make({'at': 'yesterday'}, {'at': 'date'}).fails()

    def test_in_rule_message(self) -> None:
        validator = Validator.make({'role': 'root'}, {'role': 'in:admin,user'})

        assert validator.errors().first('role') == 'The selected role is invalid.'

    def test_regex_with_delimiters(self) -> None:
        assert Validator.make({'slug': 'abc'}, {'slug': 'regex:/^[a-z]+$/'}).passes()

    def test_max_message_placeholder(self) -> None:
        validator = Validator.make({'name': 'abcdef'}, {'name': 'max:3'})

        assert validator.errors().first('name') == 'The name may not be greater than 3 characters.'

    def test_custom_messages_and_attribute_names(self) -> None:
        validator = Validator.make(
            {'first_name': ''},
            {'first_name': 'required', 'email': 'required'},
            messages={'email.required': 'We need your email.'},
        )

        assert validator.errors().messages() == {
            'first_name': ['The first name field is required.'],
            'email': ['We need your email.'],
        }

    def test_validate_raises_with_errors(self) -> None:
        validator = Validator.make({'name': 'J'}, {'name': 'min:2'})

        with pytest.raises(ValidationException) as exc_info:
            validator.validate()

        assert exc_info.value.get_first_error() == 'The name must be at least 2 characters.'
        assert validator.invalid() == {'name': 'J'}

    def test_bail_stops_after_first_failure(self) -> None:
        validator = Validator.make({'code': '!'}, {'code': 'alpha|min:3'}).bail()

        assert validator.errors().get('code') == ['The code field must contain only letters.']

    def test_after_hook_can_add_errors(self) -> None:
        validator = Validator.make({'a': '1'}, {'a': 'integer'})
        validator.after(lambda v: v.errors().add('a', 'Rejected.'))

        assert validator.fails()

    def test_extend_rule(self) -> None:
        class EvenRule(ValidationRule):
            def passes(self, attribute: str, value: Any, parameters: Optional[List[str]] = None) -> bool:
                return int(value) % 2 == 0

            def message(self) -> str:
                return "The {attribute} must be even."

        validator = Validator.make({'n': '3'}, {'n': 'even'})
        validator.extend_rule('even', EvenRule())

        assert validator.errors().all() == ['The n must be even.']


class TestMessageBag:
    def test_add_and_read(self) -> None:
        bag = MessageBag()
        bag.add('name', 'Too short.').add('name', 'Not a string.').add('age', 'Required.')

        assert bag.get('name') == ['Too short.', 'Not a string.']
        assert bag.first() == 'Too short.'
        assert bag.first('age') == 'Required.'
        assert bag.all() == ['Too short.', 'Not a string.', 'Required.']
        assert bag.count() == 3
        assert len(bag) == 3
        assert bag.has('age')
        assert not bag.has('email')

    def test_empty_bag(self) -> None:
        bag = MessageBag()

        assert bag.is_empty()
        assert bag.first() is None
        assert bag.get('name') == []

    def test_messages_is_a_copy(self) -> None:
        bag = MessageBag({'name': ['Too short.']})

        bag.messages()['name'].append('Changed.')

        assert bag.get('name') == ['Too short.']
