"""
People of History - Browse the family trees of historical people.

This package searches Wikidata for people, resolves their biographical facts
and expands their parents and children into a depth-bounded family tree.
"""

__version__ = "0.1.0"
__author__ = "People of History Contributors"
