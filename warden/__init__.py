"""
The Warden - a Wordle-style puzzle that ambushes your desktop.

A frameless, always-on-top window pops up at random intervals and demands
a five-letter word. Winners are photographed by the webcam and showered
in confetti; losers get a donkey and a generated insult.

Privacy:
- Webcam frames stay in memory and are never written to disk
- Face mesh landmarks only decorate the snapshot; nothing is recognized
- The only network call is the optional insult request, and only when
  an API key is configured

Architecture:
- core: game rules, word list, configuration
- vision: camera, face mesh, judgment capture, confetti
- services: remote insult generation
- host: shell window lifecycle and the ambush loop
- gui: PyQt6 window, overlays and widgets
"""

__version__ = "0.1.0"
__license__ = "MIT"
