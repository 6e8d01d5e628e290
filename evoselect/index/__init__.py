from evoselect.index.weighted_index import WeightedIndex

__all__ = ["WeightedIndex"]
