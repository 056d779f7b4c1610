import pytest
from faultline.core.runtime import HostRuntime
from faultline.models.schemas import CallbackTarget
from faultline.services.pipeline import ErrorPipeline
from faultline.services.snippets import SnippetProvider


class StubRuntime(HostRuntime):
    """Records hook registration instead of touching the interpreter."""

    def __init__(self):
        super().__init__()
        self.handlers = None
        self.fatal = None

    def install(self, on_error, on_exception, on_shutdown):
        self.handlers = (on_error, on_exception, on_shutdown)

    def uninstall(self):
        self.handlers = None

    def last_fatal_error(self):
        return self.fatal


class RecordingChannel:
    def __init__(self):
        self.calls = []

    def send(self, recipients, text, correlation_token=0, suppress_link_preview=True):
        self.calls.append({
            'recipients': recipients,
            'text': text,
            'correlation_token': correlation_token,
            'suppress_link_preview': suppress_link_preview,
        })


def missing_file_reader(path):
    raise FileNotFoundError(path)


@pytest.fixture
def runtime():
    return StubRuntime()


@pytest.fixture
def channel():
    return RecordingChannel()


@pytest.fixture
def reports():
    return []


@pytest.fixture
def callback_pipeline(runtime, channel, reports):
    pipeline = ErrorPipeline(runtime, channel=channel, snippets=SnippetProvider(reader=missing_file_reader))
    pipeline.configure(CallbackTarget(handler=lambda *args: reports.append(args)))
    return pipeline
