"""
World Studio - browse a gallery of worlds and create new ones with a
generative-AI World Architect.
"""

__version__ = "0.1.0"
