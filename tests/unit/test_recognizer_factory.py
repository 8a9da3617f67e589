import pytest

from docarchive.config.settings import Settings
from docarchive.recognition.engine import EngineState, RecognitionEngine
from docarchive.recognition.factory import RecognizerFactory


class TestRecognizerFactory:
    def test_creates_uninitialized_engine(self) -> None:
        engine = RecognizerFactory.create_engine(Settings(_env_file=None))
        assert isinstance(engine, RecognitionEngine)
        assert engine.state is EngineState.NEW

    def test_raises_for_unknown_engine(self) -> None:
        with pytest.raises(ValueError, match="Unknown OCR engine"):
            RecognizerFactory.create_engine(Settings(_env_file=None, ocr_engine="unknown"))
