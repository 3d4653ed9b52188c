"""
Macro Score

Scores a currency or currency pair from manually entered macroeconomic
indicators (central bank stance, inflation, labor, risk, PMI, current
account, geopolitics, flows) and maps the result to a trading bias.
"""

__version__ = "1.0.0"
__author__ = "Macro Score"
