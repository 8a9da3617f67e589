from docarchive.recognition.base import BaseRecognizer
from docarchive.recognition.engine import RecognitionEngine
from docarchive.recognition.factory import RecognizerFactory

__all__ = ["BaseRecognizer", "RecognitionEngine", "RecognizerFactory"]
