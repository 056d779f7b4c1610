import logging
import pytest
from faultline.models.schemas import CallbackTarget, RecipientsTarget
from faultline.services.dispatcher import ReportDispatcher
from faultline.services.exceptions import NotificationDispatchError, PipelineConfigError


class FailingChannel:
    def send(self, recipients, text, correlation_token=0, suppress_link_preview=True):
        raise NotificationDispatchError('VK HTTP error 500: oops')


def test_callback_target_skips_channel(channel):
    received = []
    exc = RuntimeError('x')
    dispatcher = ReportDispatcher(CallbackTarget(handler=lambda *a: received.append(a)), channel)
    assert dispatcher.dispatch('Warning', 'text', 7, exc) is True
    assert received == [('Warning', 'text', 7, exc)]
    assert channel.calls == []


def test_recipients_joined_into_one_send(channel):
    dispatcher = ReportDispatcher(RecipientsTarget(recipients=[111, 222]), channel)
    assert dispatcher.dispatch('Fatal Error', 'report') is True
    assert channel.calls == [{
        'recipients': '111,222',
        'text': 'report',
        'correlation_token': 0,
        'suppress_link_preview': True,
    }]


def test_channel_failure_not_retried(caplog):
    dispatcher = ReportDispatcher(RecipientsTarget(recipients=[1]), FailingChannel())
    with caplog.at_level(logging.WARNING):
        assert dispatcher.dispatch('Warning', 'report') is False
    assert 'Failed to deliver Warning report to 1' in caplog.text


def test_missing_channel_drops_report():
    assert ReportDispatcher(RecipientsTarget(recipients=[1])).dispatch('Warning', 'r') is False


def test_recipients_parsing():
    assert RecipientsTarget(recipients='111; 222').recipients == [111, 222]
    assert RecipientsTarget(recipients=5).recipients == [5]
    with pytest.raises(ValueError):
        RecipientsTarget(recipients=[])


def test_rejects_untyped_target():
    with pytest.raises(PipelineConfigError):
        ReportDispatcher([111, 222])
