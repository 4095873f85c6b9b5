"""
Hard-string detectors, one module per syntax family.

Import the detector modules directly (``from keyscout.core.parsers import
html``); nothing is re-exported here so that the scope filter can use the
grammar without pulling in the detectors.
"""
