from fontlens.detection.classifier import TextClassifier
from fontlens.detection.sampler import StyleSampler

__all__ = ["StyleSampler", "TextClassifier"]
