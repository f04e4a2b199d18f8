import numpy as np
import pytest

from argo_convert.exceptions import MissingParameterError
from argo_convert.ingestion.measurements import (
    MeasurementKind, extract_measurements, measurement_variable
)
from argo_convert.ingestion.unpacker import FLOAT_SENTINEL


@pytest.mark.parametrize("data_mode,kind", [
    ('R', MeasurementKind.REALTIME),
    ('A', MeasurementKind.ADJUSTED),
    ('D', MeasurementKind.ADJUSTED),
    ('', MeasurementKind.ADJUSTED),
])
def test_kind_from_data_mode(data_mode, kind):
    assert MeasurementKind.from_data_mode(data_mode) is kind


def test_measurement_variable_names():
    assert measurement_variable('TEMP', MeasurementKind.REALTIME) == 'TEMP'
    assert measurement_variable('TEMP', MeasurementKind.ADJUSTED) == 'TEMP_ADJUSTED'


def test_realtime_extraction(generator):
    ds = generator.generate_profile(data_mode='R', n_levels=4)
    result = extract_measurements(ds, ['PRES', 'TEMP', 'PSAL'], 'R', 4)

    assert result.kind is MeasurementKind.REALTIME
    assert list(result.parameters) == ['PRES', 'TEMP', 'PSAL']

    temp = result.parameters['TEMP']
    assert temp.values == [20.0, 19.5, 19.0, 18.5]
    assert temp.level_qc == ['1', '1', '1', '1']
    assert temp.adjusted_level_qc is None
    assert temp.profile_qc == 'A'
    assert temp.units == 'degree_Celsius'
    assert temp.long_name == 'Sea temperature in-situ ITS-90 scale'
    assert temp.data_mode == 'R'
    assert temp.variable_name == 'TEMP'
    assert result.adjusted_level_qc() is None


def test_adjusted_extraction(generator):
    ds = generator.generate_profile(data_mode='D', n_levels=3)
    result = extract_measurements(ds, ['PRES', 'TEMP', 'PSAL'], 'D', 3)

    assert result.kind is MeasurementKind.ADJUSTED
    assert result.values()['PSAL'] == [35.5, 35.75, 36.0]
    assert result.level_qc()['PSAL'] == ['1', '1', '1']
    assert result.adjusted_level_qc()['PSAL'] == ['2', '2', '2']
    assert result.parameters['PSAL'].units == 'psu'
    assert result.parameters['PSAL'].variable_name == 'PSAL_ADJUSTED'


def test_only_first_profile_is_extracted(generator):
    ds = generator.generate_profile(n_levels=2, n_prof=2)
    result = extract_measurements(ds, ['PRES'], 'R', 2)
    assert result.values()['PRES'] == [5.0, 15.0]


def test_missing_measurement_variable_is_fatal(generator):
    ds = generator.generate_profile(data_mode='D').drop_vars('TEMP_ADJUSTED')
    with pytest.raises(MissingParameterError, match='TEMP_ADJUSTED'):
        extract_measurements(ds, ['PRES', 'TEMP', 'PSAL'], 'D', 5)


def test_missing_raw_variable_is_fatal_in_realtime_mode(generator):
    ds = generator.generate_profile(data_mode='R').drop_vars('PSAL')
    with pytest.raises(MissingParameterError):
        extract_measurements(ds, ['PRES', 'TEMP', 'PSAL'], 'R', 5)


def test_level_count_mismatch_is_fatal(generator):
    ds = generator.generate_profile(n_levels=5)
    with pytest.raises(MissingParameterError, match='expected 6'):
        extract_measurements(ds, ['TEMP'], 'R', 6)


def test_missing_qc_variables_degrade_to_empty_flags(generator):
    ds = generator.generate_profile(n_levels=3).drop_vars(['TEMP_QC', 'PROFILE_TEMP_QC'])
    temp = extract_measurements(ds, ['TEMP'], 'R', 3).parameters['TEMP']
    assert temp.level_qc == ['', '', '']
    assert temp.profile_qc == ''


def test_blank_parameter_slots_are_ignored(generator):
    ds = generator.generate_profile(parameters=('PRES', 'TEMP'), n_param=4)
    result = extract_measurements(ds, ['PRES', 'TEMP', '', ''], 'R', 5)
    assert list(result.parameters) == ['PRES', 'TEMP']


def test_no_parameters_gives_empty_set(generator):
    ds = generator.generate_profile(parameters=())
    result = extract_measurements(ds, [], 'R', 5)
    assert result.parameters == {}
    assert result.values() == {}


def test_non_finite_values_become_sentinel(generator):
    ds = generator.generate_profile(n_levels=3)
    temp = ds['TEMP'].values.copy()
    temp[0, 1] = np.nan
    ds['TEMP'] = (['N_PROF', 'N_LEVELS'], temp, ds['TEMP'].attrs)

    values = extract_measurements(ds, ['TEMP'], 'R', 3).values()['TEMP']
    assert values == [20.0, FLOAT_SENTINEL, 19.0]


def test_parameter_data_modes_override_profile_mode(generator):
    ds = generator.generate_profile(data_mode='D')
    result = extract_measurements(ds, ['PRES', 'TEMP', 'PSAL'], 'D', 5, parameter_modes=['D', 'A', ''])
    assert result.parameters['PRES'].data_mode == 'D'
    assert result.parameters['TEMP'].data_mode == 'A'
    assert result.parameters['PSAL'].data_mode == 'D'


def test_missing_attributes_are_empty(generator):
    ds = generator.generate_profile(parameters=('CNDC',))
    cndc = extract_measurements(ds, ['CNDC'], 'R', 5).parameters['CNDC']
    assert cndc.units == ''
    assert cndc.long_name == ''
