"""Processing layers for the requirement drift pipeline."""

# Note: Import layers individually to avoid circular imports
# Use: from reqdrift.layers.layer1_normalization import Normalizer
# Use: from reqdrift.layers.layer2_chaining import ChainBuilder
# Use: from reqdrift.layers.layer3_resolution import Resolver
# Use: from reqdrift.layers.layer4_matching import EvidenceMatcher
# Use: from reqdrift.layers.layer5_classification import GapClassifier
# Use: from reqdrift.layers.layer6_report import ReportGenerator

__all__ = [
    "layer1_normalization",
    "layer2_chaining",
    "layer3_resolution",
    "layer4_matching",
    "layer5_classification",
    "layer6_report",
]
