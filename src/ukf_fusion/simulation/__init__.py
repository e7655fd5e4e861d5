"""
Ground-truth simulation / 真值模拟
"""

from .truth import TruthSimulator, TruthTick

__all__ = ["TruthSimulator", "TruthTick"]
