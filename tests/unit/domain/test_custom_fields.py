"""Tests for custom field definitions and submission validation."""
from types import SimpleNamespace

import pytest

from parafort.domain.custom_fields import option_values, validate_field_definition, validate_submission
from parafort.domain.exceptions import ValidationError


def _field(**kwargs):
    defaults = {
        'field_name': 'company_name',
        'field_label': 'Company name',
        'field_type': 'text',
        'is_required': False,
        'is_active': True,
        'validation_rules': None,
        'options': None,
    }
    defaults.update(kwargs)
    return SimpleNamespace(**defaults)


class TestValidateFieldDefinition:

    def test_valid_definition(self):
        validate_field_definition({'fieldName': 'ein_number', 'fieldLabel': 'EIN', 'fieldType': 'text'})

    @pytest.mark.parametrize("data,field", [
        ({'fieldLabel': 'EIN', 'fieldType': 'text'}, 'fieldName'),
        ({'fieldName': 'EinNumber', 'fieldLabel': 'EIN', 'fieldType': 'text'}, 'fieldName'),
        ({'fieldName': 'ein', 'fieldType': 'text'}, 'fieldLabel'),
        ({'fieldName': 'ein', 'fieldLabel': 'EIN', 'fieldType': 'color'}, 'fieldType'),
        ({'fieldName': 'tier', 'fieldLabel': 'Tier', 'fieldType': 'select', 'options': []}, 'options'),
        ({'fieldName': 'ein', 'fieldLabel': 'EIN', 'fieldType': 'text', 'fieldCategory': 'misc'}, 'fieldCategory'),
        ({'fieldName': 'ein', 'fieldLabel': 'EIN', 'fieldType': 'text', 'width': 'wide'}, 'width'),
    ])
    def test_invalid_definition(self, data, field):
        with pytest.raises(ValidationError) as exc:
            validate_field_definition(data)
        assert exc.value.field == field

    @pytest.mark.parametrize("rules", [
        ['min', 1],
        {'pattern': '['},
        {'pattern': 42},
        {'min': 'one'},
        {'max': None},
        {'minLength': 'short'},
        {'maxLength': True},
        {'max': 'inf'},
    ])
    def test_unusable_validation_rules(self, rules):
        with pytest.raises(ValidationError) as exc:
            validate_field_definition({'fieldName': 'ein', 'fieldLabel': 'EIN', 'fieldType': 'text',
                                       'validationRules': rules})
        assert exc.value.field == 'validationRules'

    def test_numeric_strings_are_accepted_as_bounds(self):
        validate_field_definition({'fieldName': 'members', 'fieldLabel': 'Members', 'fieldType': 'number',
                                   'validationRules': {'min': '1', 'max': 10, 'maxLength': '3', 'pattern': r'\d+'}})


def test_option_values_accepts_strings_and_objects():
    assert option_values(['a', {'value': 'b', 'label': 'B'}]) == ['a', 'b']
    assert option_values(None) == []


class TestValidateSubmission:

    def test_required_field_missing(self):
        errors = validate_submission([_field(is_required=True)], {})
        assert errors == {'company_name': 'Company name is required'}

    def test_blank_string_counts_as_missing(self):
        assert 'company_name' in validate_submission([_field(is_required=True)], {'company_name': '  '})

    def test_unchecked_required_checkbox(self):
        field = _field(field_name='agree', field_label='Terms', field_type='checkbox', is_required=True)
        assert validate_submission([field], {'agree': False}) == {'agree': 'Terms is required'}

    def test_optional_blank_field_is_fine(self):
        assert validate_submission([_field(field_type='email')], {'company_name': ''}) == {}

    def test_inactive_fields_are_ignored(self):
        assert validate_submission([_field(is_required=True, is_active=False)], {}) == {}

    @pytest.mark.parametrize("field_type,value", [
        ('email', 'nope'),
        ('phone', 'call me'),
        ('url', 'example.com'),
        ('date', '06/15/2026'),
        ('number', 'ten'),
    ])
    def test_format_errors(self, field_type, value):
        errors = validate_submission([_field(field_type=field_type)], {'company_name': value})
        assert 'company_name' in errors

    @pytest.mark.parametrize("field_type,value", [
        ('email', 'owner@example.com'),
        ('phone', '+1 (555) 123-4567'),
        ('url', 'https://example.com'),
        ('date', '2026-06-15'),
        ('number', '12'),
    ])
    def test_valid_formats(self, field_type, value):
        assert validate_submission([_field(field_type=field_type)], {'company_name': value}) == {}

    def test_option_membership(self):
        field = _field(field_name='tier', field_label='Tier', field_type='select',
                       options=[{'value': 'basic', 'label': 'Basic'}, 'premium'])
        assert validate_submission([field], {'tier': 'premium'}) == {}
        assert validate_submission([field], {'tier': 'gold'}) == {'tier': 'Tier must be one of the available options'}

    def test_number_bounds(self):
        field = _field(field_name='members', field_label='Members', field_type='number',
                       validation_rules={'min': 1, 'max': 10})
        assert 'members' in validate_submission([field], {'members': 0})
        assert 'members' in validate_submission([field], {'members': 11})
        assert validate_submission([field], {'members': 5}) == {}

    def test_length_and_pattern_rules(self):
        field = _field(validation_rules={'minLength': 3, 'maxLength': 5, 'pattern': '[A-Z]+'})
        assert 'company_name' in validate_submission([field], {'company_name': 'AB'})
        assert 'company_name' in validate_submission([field], {'company_name': 'ABCDEF'})
        assert 'company_name' in validate_submission([field], {'company_name': 'abcd'})
        assert validate_submission([field], {'company_name': 'ABCD'}) == {}

    def test_collects_every_error(self):
        fields = [_field(is_required=True), _field(field_name='email', field_label='Email', field_type='email')]
        errors = validate_submission(fields, {'email': 'bad'})
        assert set(errors) == {'company_name', 'email'}
