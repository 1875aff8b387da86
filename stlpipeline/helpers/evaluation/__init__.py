from stlpipeline.helpers.evaluation.qualityEvaluator import QualityEvaluator

__all__ = ["QualityEvaluator"]
