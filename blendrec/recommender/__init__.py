"""Scoring module for BlendRec.

This module contains the feature vectorizer, interaction weighter, the
content-based, category-affinity and hybrid scorers, and the similar-items
scorer. Every scorer is a pure function of a catalog snapshot and an
interaction snapshot.
"""
