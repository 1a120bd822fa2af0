from pathlib import Path
from dotenv import load_dotenv
import pytest

# Load environment variables for tests before any shipping module reads settings
load_dotenv(Path(__file__).resolve().parents[1] / '.env.test')

from tests.oracle_mocks import RecordingMetrics  # noqa: E402


@pytest.fixture
def recording_metrics():
    return RecordingMetrics()


@pytest.fixture
def override_oracle():
    """Point the app's pricing client dependency at a stub transport.

    Usage: ``override_oracle(text_oracle("12.34"))``; overrides are cleared
    after the test.
    """
    from shipping.api import dependencies
    from shipping.main import app
    from tests.oracle_mocks import make_client

    def _apply(transport, metrics=None):
        from shipping.services.shipping_quote import QuoteService

        client = make_client(transport)
        app.dependency_overrides[dependencies.get_pricing_client] = lambda: client
        if metrics is not None:
            app.dependency_overrides[dependencies.get_quote_service] = lambda: QuoteService(client, metrics=metrics)
        return client

    yield _apply
    app.dependency_overrides.clear()
