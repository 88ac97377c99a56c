"""Tests for Slack message URL parsing."""

import pytest

from slack_mcp.errors import ErrorKind, SlackToolError
from slack_mcp.slack.urls import (
    convert_timestamp,
    format_url_timestamp,
    is_valid_slack_url,
    parse_message_url,
)


BASE = 'https://ws.slack.com/archives/C01234567/p1355517523000008'


class TestParseMessageUrl:
    """Tests for parse_message_url."""

    def test_plain_message_url(self):
        coordinate = parse_message_url(BASE)
        assert coordinate.channel_id == 'C01234567'
        assert coordinate.timestamp == '1355517523.000008'
        assert coordinate.thread_ts is None
        assert coordinate.is_thread is False

    def test_thread_url(self):
        coordinate = parse_message_url(f'{BASE}?thread_ts=1355517500.000001&cid=C01234567')
        assert coordinate.channel_id == 'C01234567'
        assert coordinate.timestamp == '1355517523.000008'
        assert coordinate.thread_ts == '1355517500.000001'
        assert coordinate.is_thread is True

    @pytest.mark.parametrize(
        'suffix',
        [
            '?thread_ts=1355517500.000001',
            '?cid=C01234567&thread_ts=1355517500.000001',
            '?foo=bar&thread_ts=1355517500.000001&baz=1',
            '?thread_ts=1355517500.000001#section',
        ],
    )
    def test_thread_ts_found_regardless_of_order_and_extras(self, suffix):
        coordinate = parse_message_url(BASE + suffix)
        assert coordinate.is_thread is True
        assert coordinate.thread_ts == '1355517500.000001'

    def test_fragment_and_unknown_params_ignored(self):
        coordinate = parse_message_url(f'{BASE}?utm_source=share#anchor')
        assert coordinate.timestamp == '1355517523.000008'
        assert coordinate.is_thread is False

    def test_empty_thread_ts_is_not_a_thread(self):
        coordinate = parse_message_url(f'{BASE}?thread_ts=')
        assert coordinate.is_thread is False
        assert coordinate.thread_ts is None

    def test_thread_ts_passed_through_unvalidated(self):
        coordinate = parse_message_url(f'{BASE}?thread_ts=garbage')
        assert coordinate.thread_ts == 'garbage'

    def test_strict_thread_ts_rejects_malformed(self):
        with pytest.raises(SlackToolError) as exc_info:
            parse_message_url(f'{BASE}?thread_ts=garbage', strict_thread_ts=True)
        assert exc_info.value.kind is ErrorKind.INVALID_URL

    def test_strict_thread_ts_accepts_well_formed(self):
        coordinate = parse_message_url(f'{BASE}?thread_ts=1355517500.000001', strict_thread_ts=True)
        assert coordinate.thread_ts == '1355517500.000001'

    @pytest.mark.parametrize(
        'url',
        [
            '',
            'not-a-url',
            'http://x.slack.com/archives/C1/p123',
            'http://ws.slack.com/archives/C01234567/p1355517523000008',
            'https://ws.example.com/archives/C01234567/p1355517523000008',
            'https://slack.com/archives/C01234567/p1355517523000008',
            'https://ws.slack.com/archives/C01234567/1355517523000008',
            'https://ws.slack.com/archives/c01234567/p1355517523000008',
            'https://ws.slack.com/archives/C01234567/p1355517523000008/extra',
            'https://ws.slack.com/messages/C01234567/p1355517523000008',
            'https://ws.slack.com/archives/C01234567/p135551752300000',
            'https://ws.slack.com/archives/C01234567/p13555175230000089',
            'https://ws.slack.com/archives/C01234567/p13555175x3000008',
        ],
    )
    def test_invalid_urls(self, url):
        with pytest.raises(SlackToolError) as exc_info:
            parse_message_url(url)
        assert exc_info.value.kind is ErrorKind.INVALID_URL

    def test_wrong_digit_count_message(self):
        with pytest.raises(SlackToolError) as exc_info:
            parse_message_url('https://ws.slack.com/archives/C01234567/p123')
        assert 'expected 16 digits, got 3' in exc_info.value.detail

    def test_custom_domain_suffix(self):
        url = 'https://acme.enterprise.slack.com/archives/C01234567/p1355517523000008'
        assert parse_message_url(url, domain_suffix='.enterprise.slack.com').channel_id == 'C01234567'
        with pytest.raises(SlackToolError):
            parse_message_url(BASE, domain_suffix='.enterprise.slack.com')


class TestTimestampConversion:
    """Tests for URL <-> API timestamp conversion."""

    @pytest.mark.parametrize('digits', ['1355517523000008', '0000000000000000', '9999999999999999'])
    def test_convert_and_back(self, digits):
        api_ts = convert_timestamp(digits)
        assert api_ts == f'{digits[:10]}.{digits[10:]}'
        assert format_url_timestamp(api_ts) == digits

    def test_rejects_wrong_length(self):
        with pytest.raises(SlackToolError, match='expected 16 digits'):
            convert_timestamp('12345')

    def test_rejects_non_digits(self):
        with pytest.raises(SlackToolError, match='non-digit'):
            convert_timestamp('13555175230000a8')

    def test_rejects_non_ascii_digits(self):
        with pytest.raises(SlackToolError):
            convert_timestamp('١٣٥٥٥١٧٥٢٣٠٠٠٠٠٨')


class TestIsValidSlackUrl:
    def test_valid(self):
        assert is_valid_slack_url(BASE)
        assert is_valid_slack_url(f'{BASE}?thread_ts=1.2')

    def test_invalid(self):
        assert not is_valid_slack_url('')
        assert not is_valid_slack_url('https://example.com/archives/C1/p1355517523000008')
        assert not is_valid_slack_url('https://ws.slack.com/team/U123')
