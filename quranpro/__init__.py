"""
Quran Pro API: reading tracker and quota-gated Islamic assistant chatbot
"""
__version__ = "1.0.0"
