"""Graph primitives and helpers.

This package provides the capacitated multi-directed graph type `FlowNetwork`
and helpers for conversion to and from NetworkX graphs (`convert`).
"""
