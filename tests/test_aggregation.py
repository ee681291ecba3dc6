"""Pytest tests for device aggregation and ordering."""

import pytest

from src.bandix_client.models import DeviceRecord, RateTotals, TotalsSnapshot
from src.telemetry.aggregator import aggregate, aggregate_rates, aggregate_totals
from src.telemetry.sorting import SortDirection, SortField, SortSpec, sort_by_spec, sort_devices


def device(mac, **kwargs):
    return DeviceRecord(mac=mac, **kwargs)


class TestAggregator:
    """Test cases for totals and rates."""

    @pytest.mark.unit
    def test_totals(self, sample_devices):
        totals = aggregate_totals(sample_devices)
        assert totals == TotalsSnapshot(download=1500, upload=1100, combined=2600)

    @pytest.mark.unit
    def test_rates(self, sample_devices):
        assert aggregate_rates(sample_devices) == RateTotals(download=300, upload=350)

    @pytest.mark.unit
    def test_empty(self):
        totals, rates = aggregate([])
        assert totals == TotalsSnapshot(0, 0, 0)
        assert rates == RateTotals(0, 0)

    @pytest.mark.unit
    def test_accepts_generator(self, sample_devices):
        totals, rates = aggregate(d for d in sample_devices)
        assert totals.combined == 2600
        assert rates.download == 300


class TestSorting:
    """Test cases for the clients table ordering."""

    @pytest.mark.unit
    def test_upload_speed_descending(self, sample_devices):
        ordered = sort_devices(sample_devices, SortField.UPLOAD_SPEED, SortDirection.DESC)
        assert [d.hostname for d in ordered] == ['phone', 'laptop.lan']

    @pytest.mark.unit
    def test_accepts_string_values(self, sample_devices):
        ordered = sort_devices(sample_devices, 'downloadSpeed', 'asc')
        assert [d.hostname for d in ordered] == ['phone', 'laptop.lan']

    @pytest.mark.unit
    def test_input_not_mutated(self, sample_devices):
        original = list(sample_devices)
        sort_devices(sample_devices, SortField.UPLOAD, SortDirection.ASC)
        assert sample_devices == original

    @pytest.mark.unit
    def test_ip_sorts_numerically(self):
        devices = [
            device('01', ip='192.168.1.100'),
            device('02', ip='192.168.1.9'),
            device('03', ip=None),
            device('04', ip='10.0.0.1'),
        ]
        ordered = sort_devices(devices, SortField.IP, SortDirection.ASC)
        assert [d.mac for d in ordered] == ['03', '04', '02', '01']

    @pytest.mark.unit
    def test_hostname_case_insensitive_and_missing_first(self):
        devices = [
            device('01', hostname='zeta'),
            device('02', hostname='Alpha.lan'),
            device('03', hostname=None),
            device('04', hostname='beta'),
        ]
        ordered = sort_devices(devices, SortField.HOSTNAME, SortDirection.ASC)
        assert [d.mac for d in ordered] == ['03', '02', '04', '01']

    @pytest.mark.unit
    def test_hostname_domain_and_case_compare_equal(self):
        devices = [device('1', hostname='Router.local'), device('2', hostname='router')]

        for direction in (SortDirection.ASC, SortDirection.DESC):
            ordered = sort_devices(devices, SortField.HOSTNAME, direction)
            assert [d.mac for d in ordered] == ['1', '2']

    @pytest.mark.unit
    def test_stable_for_equal_keys(self):
        devices = [device(str(i), download=100) for i in range(5)]

        for direction in (SortDirection.ASC, SortDirection.DESC):
            ordered = sort_devices(devices, SortField.DOWNLOAD, direction)
            assert [d.mac for d in ordered] == ['0', '1', '2', '3', '4']

    @pytest.mark.unit
    def test_missing_numbers_sort_as_zero(self):
        devices = [device('a', download=5), device('b', download=None), device('c', download=1)]
        ordered = sort_devices(devices, SortField.DOWNLOAD, SortDirection.ASC)
        assert [d.mac for d in ordered] == ['b', 'c', 'a']

    @pytest.mark.unit
    def test_spec_toggle(self, sample_devices):
        spec = SortSpec()
        assert spec.field is SortField.DOWNLOAD_SPEED
        assert spec.direction is SortDirection.DESC

        spec = spec.toggled(SortField.DOWNLOAD_SPEED)
        assert spec.direction is SortDirection.ASC

        spec = spec.toggled('hostname')
        assert spec == SortSpec(SortField.HOSTNAME, SortDirection.DESC)
        assert [d.hostname for d in sort_by_spec(sample_devices, spec)] == ['phone', 'laptop.lan']
