"""
Checksum-framed text command protocol for acoustic and radio modem links.

Encodes addressed commands into single-line frames protected by a CRC-16 and
decodes received frames back into commands.
"""

__version__ = "1.0.0"
