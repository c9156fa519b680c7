"""
Unit tests for configuration validation.
"""

import json

import pytest
import yaml

from summarymetrics.utils.config_validator import (
    ConfigurationError,
    ExperimentConfigValidator,
    ReservedLabelError,
    SummaryConfigValidator,
    WorkloadConfigValidator,
    validate_and_fix_config,
    validate_label_names,
    validate_metric_name,
    validate_quantiles,
)


def valid_config():
    return {
        'simulation': {
            'max_simulation_time': 10,
            'random_seed': 1,
        },
        'summary': {
            'quantiles': [0.5, 0.99],
            'reservoir_size': 64,
        },
        'workload': {
            'client_profiles': [
                {
                    'profile_name': 'web',
                    'inter_arrival_time_dist_config': {'type': 'Exponential', 'rate': 5.0},
                    'service_time_dist_config': {'type': 'Constant', 'value': 0.1},
                }
            ]
        },
    }


class TestNameValidation:
    """Test metric and label name checks."""

    def test_valid_metric_names(self):
        for name in ('latency', 'http_requests_total', 'ns:metric_1', '_private'):
            validate_metric_name(name)

    @pytest.mark.parametrize('name', ['', '1abc', 'has-dash', 'has space'])
    def test_invalid_metric_names(self, name):
        with pytest.raises(ConfigurationError):
            validate_metric_name(name)

    def test_label_names_returned_as_tuple(self):
        assert validate_label_names(['a', 'b']) == ('a', 'b')

    def test_reserved_label(self):
        with pytest.raises(ReservedLabelError, match="Summary cannot have a label named 'quantile'"):
            validate_label_names(['path', 'quantile'], reserved=('quantile',), kind='Summary')

    def test_quantile_allowed_when_not_reserved(self):
        assert validate_label_names(['quantile']) == ('quantile',)

    def test_double_underscore_reserved(self):
        with pytest.raises(ConfigurationError):
            validate_label_names(['__name'])

    def test_single_string_rejected(self):
        """A bare string would otherwise be split into one label per character."""
        with pytest.raises(ConfigurationError):
            validate_label_names('path')


class TestQuantileValidation:
    """Test quantile list checks."""

    def test_keeps_order_and_duplicates(self):
        assert validate_quantiles([0.9, 0.5, 0.5]) == (0.9, 0.5, 0.5)

    def test_empty_and_none(self):
        assert validate_quantiles([]) == ()
        assert validate_quantiles(None) == ()

    @pytest.mark.parametrize('q', [1.5, -0.5, float('nan')])
    def test_out_of_range(self, q):
        with pytest.raises(ConfigurationError, match=r'interval \[0, 1\]'):
            validate_quantiles([0.5, q])

    def test_configuration_error_is_value_error(self):
        assert issubclass(ConfigurationError, ValueError)
        assert issubclass(ReservedLabelError, ConfigurationError)


class TestSummaryConfigValidator:
    """Test the summary section."""

    def test_valid(self):
        assert SummaryConfigValidator.validate({'quantiles': [0.5], 'reservoir_size': 10}) == []

    def test_empty_section(self):
        assert SummaryConfigValidator.validate({}) == []

    def test_bad_values(self):
        errors = SummaryConfigValidator.validate({
            'quantiles': [0.5, 3],
            'reservoir_size': -4,
            'namespace': 'bad-ns',
        })
        assert any('Invalid quantile 3' in e for e in errors)
        assert any('Invalid reservoir_size' in e for e in errors)
        assert any('Invalid namespace' in e for e in errors)

    def test_quantiles_not_list(self):
        errors = SummaryConfigValidator.validate({'quantiles': 0.5})
        assert errors == ['summary.quantiles must be a list']

    def test_not_a_mapping(self):
        """A null or scalar section is reported rather than raising."""
        assert SummaryConfigValidator.validate(None) == ['summary section must be a mapping']
        assert SummaryConfigValidator.validate([0.5]) == ['summary section must be a mapping']

    def test_wrong_typed_fields(self):
        errors = SummaryConfigValidator.validate({
            'quantiles': ['high', True],
            'reservoir_size': '64',
            'namespace': 7,
        })
        assert any("Invalid quantile 'high'" in e for e in errors)
        assert any('Invalid quantile True' in e for e in errors)
        assert any('Invalid reservoir_size' in e for e in errors)
        assert any('Invalid namespace' in e for e in errors)


class TestWorkloadConfigValidator:
    """Test the workload section."""

    def test_valid(self):
        assert WorkloadConfigValidator.validate(valid_config()['workload']) == []

    def test_missing_profiles(self):
        errors = WorkloadConfigValidator.validate({})
        assert errors == ['Workload missing client_profiles']

    def test_missing_distribution(self):
        workload = valid_config()['workload']
        del workload['client_profiles'][0]['service_time_dist_config']
        errors = WorkloadConfigValidator.validate(workload)
        assert any('missing service_time_dist_config' in e for e in errors)

    def test_unknown_distribution_type(self):
        workload = valid_config()['workload']
        workload['client_profiles'][0]['service_time_dist_config'] = {'type': 'Zipf'}
        errors = WorkloadConfigValidator.validate(workload)
        assert any("unknown type 'Zipf'" in e for e in errors)

    def test_non_positive_rate(self):
        workload = valid_config()['workload']
        workload['client_profiles'][0]['inter_arrival_time_dist_config'] = {'type': 'Exponential', 'rate': 0}
        errors = WorkloadConfigValidator.validate(workload)
        assert any('rate must be positive' in e for e in errors)

    def test_duplicate_profile_names(self):
        workload = valid_config()['workload']
        workload['client_profiles'].append(dict(workload['client_profiles'][0]))
        errors = WorkloadConfigValidator.validate(workload)
        assert any('Duplicate client profile name' in e for e in errors)

    def test_mixture_components_checked(self):
        workload = valid_config()['workload']
        workload['client_profiles'][0]['service_time_dist_config'] = {
            'type': 'Mixture',
            'components': [{'type': 'Constant', 'value': 1}, {'value': 2}],
        }
        errors = WorkloadConfigValidator.validate(workload)
        assert any('component 1 missing type' in e for e in errors)

    def test_not_a_mapping(self):
        assert WorkloadConfigValidator.validate(None) == ['workload section must be a mapping']

    def test_profiles_not_a_list(self):
        errors = WorkloadConfigValidator.validate({'client_profiles': 'web'})
        assert errors == ['workload.client_profiles must be a list']

    def test_profile_not_a_mapping(self):
        """A malformed profile is reported and the remaining profiles still checked."""
        workload = valid_config()['workload']
        workload['client_profiles'].insert(0, 'web')
        workload['client_profiles'][1]['service_time_dist_config'] = {'type': 'Zipf'}
        errors = WorkloadConfigValidator.validate(workload)
        assert 'Client profile 0 must be a mapping' in errors
        assert any("Client profile 1 service_time_dist_config has unknown type 'Zipf'" in e for e in errors)

    def test_non_numeric_rate(self):
        workload = valid_config()['workload']
        workload['client_profiles'][0]['inter_arrival_time_dist_config'] = {'type': 'Exponential', 'rate': 'fast'}
        errors = WorkloadConfigValidator.validate(workload)
        assert any("rate must be a number, got 'fast'" in e for e in errors)

    def test_mixture_components_not_a_list(self):
        workload = valid_config()['workload']
        workload['client_profiles'][0]['service_time_dist_config'] = {'type': 'Mixture', 'components': 'none'}
        errors = WorkloadConfigValidator.validate(workload)
        assert any('components must be a list' in e for e in errors)


class TestExperimentConfigValidator:
    """Test complete configuration validation."""

    def test_valid(self):
        is_valid, errors = ExperimentConfigValidator.validate(valid_config())
        assert is_valid
        assert errors == []

    def test_missing_top_level(self):
        is_valid, errors = ExperimentConfigValidator.validate({'simulation': {'max_simulation_time': 1}})
        assert not is_valid
        assert 'Missing top-level fields' in errors[0]

    def test_invalid_simulation_time(self):
        config = valid_config()
        config['simulation']['max_simulation_time'] = 0
        is_valid, errors = ExperimentConfigValidator.validate(config)
        assert not is_valid
        assert any('Invalid max_simulation_time' in e for e in errors)

    def test_not_a_mapping(self):
        is_valid, errors = ExperimentConfigValidator.validate(['not', 'a', 'dict'])
        assert not is_valid

    def test_null_summary_section(self):
        config = valid_config()
        config['summary'] = None
        is_valid, errors = ExperimentConfigValidator.validate(config)
        assert not is_valid
        assert errors == ['summary section must be a mapping']

    def test_summary_section_optional(self):
        config = valid_config()
        del config['summary']
        assert ExperimentConfigValidator.validate(config) == (True, [])

    @pytest.mark.parametrize('section', ['simulation', 'workload'])
    def test_required_section_not_a_mapping(self, section):
        config = valid_config()
        config[section] = None
        is_valid, errors = ExperimentConfigValidator.validate(config)
        assert not is_valid
        assert f'{section} section must be a mapping' in errors

    @pytest.mark.parametrize('value', ['10', None, True, [10]])
    def test_non_numeric_simulation_time(self, value):
        config = valid_config()
        config['simulation']['max_simulation_time'] = value
        is_valid, errors = ExperimentConfigValidator.validate(config)
        assert not is_valid
        assert any('Invalid max_simulation_time' in e for e in errors)


class TestValidateAndFixConfig:
    """Test file loading and default filling."""

    def test_yaml_file_gets_default_quantiles(self, tmp_path):
        config = valid_config()
        del config['summary']
        path = tmp_path / 'config.yaml'
        path.write_text(yaml.safe_dump(config))

        is_valid, errors, fixed = validate_and_fix_config(str(path))
        assert is_valid
        assert fixed['summary']['quantiles'] == [0.5, 0.95, 0.98, 0.99, 0.999]

    def test_json_file_with_errors(self, tmp_path):
        config = valid_config()
        config['summary']['quantiles'] = [1.2]
        path = tmp_path / 'config.json'
        path.write_text(json.dumps(config))

        is_valid, errors, _ = validate_and_fix_config(str(path))
        assert not is_valid
        assert len(errors) == 1

    def test_null_summary_in_yaml(self, tmp_path):
        """``summary:`` with no body loads as None and is reported, not filled in."""
        config = valid_config()
        config['summary'] = None
        path = tmp_path / 'config.yaml'
        path.write_text(yaml.safe_dump(config))

        is_valid, errors, fixed = validate_and_fix_config(str(path))
        assert not is_valid
        assert errors == ['summary section must be a mapping']
        assert fixed['summary'] is None

    def test_wrong_typed_sections_in_yaml(self, tmp_path):
        path = tmp_path / 'config.yaml'
        path.write_text(yaml.safe_dump({'simulation': 'fast', 'workload': [], 'summary': 'p99'}))

        is_valid, errors, _ = validate_and_fix_config(str(path))
        assert not is_valid
        assert set(errors) == {
            'simulation section must be a mapping',
            'summary section must be a mapping',
            'workload section must be a mapping',
        }
