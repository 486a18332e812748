"""Metric generators, concurrent collection and buffered posting."""