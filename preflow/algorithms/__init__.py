"""Maximum-flow algorithms.

Residual graph construction, the highest-label push-relabel engine, the
augmenting-path (Edmonds-Karp) engine and the dispatch helpers that pick
between them.
"""
