import re

FARMING_ADVISOR_SYSTEM_PROMPT = ('You are a specialized financial advisor focused on stable yield farming strategies. '
'Provide conservative, well-researched advice on DeFi protocols, yield optimization, '
'risk assessment, and portfolio diversification. Always prioritize security and '
'sustainability over high APYs. Include relevant warnings about smart contract risks, '
'impermanent loss, and market volatility where appropriate.')

# Replacement markers are substituted in this order: portfolio, price, apr
FARMING_STRATEGY_PROMPT = '''I have the following portfolio:

___PORTFOLIO_REPLACE___

Here is the current market price of the tokens in the portfolio:

___PRICE_REPLACE___

Here is the current APR of the tokens other than this deposit_apr is 0 and not borrowable:

___APR_REPLACE___

I want to optimize my yield farming strategy.

Please recommend a strategy that is delta neutral, meaning you should take both opposite positions between CEX and DEX.
The Eisen portfolio is for DEX, and Binance is for CEX.
In Binance, you can only trade on BTC, ETH, and EIGEN.
In Eisen, you can trade on tokens [USDT, USDC, ETH, WBTC, WETH, cbETH, aBascbETH, aBasweETH, weETH, ezETH, aBasezETH, aBasWETH, aBasUSDC, wstETH, aBaswstETH, aBascbBTC, cbBTC, aBasUSDbC, USDbC] in the portfolio only on Base chain, chain id is 8453.
Here is an example of the output format. It should be JSON; do not print anything other than the JSON:

{
    "exchanges": {
        "binance": {
            "positions": [
                {
                    "position": "short",
                    "token": "<token_symbol1>",
                    "amount": "<amount>",
                    "price": "<price>",
                    "side": "sell"
                },
                {
                    "position": "short",
                    "token": "<token_symbol2>",
                    "amount": "<amount>",
                    "price": "<price>",
                    "side": "sell"
                }
            ]
        },
        "eisen": {
            "swaps": [
                {
                    "token_in": "mETH",
                    "token_out": "ETH",
                    "amount": "<amount>"
                },
                {
                    "token_in": "stETH",
                    "token_out": "ETH",
                    "amount": "<amount>"
                }
            ]
        }
    }
}
'''

STRATEGY_REVIEW_QUESTION = ("Is this response accurate, helpful, and following best practices for yield farming? "
"Respond with only 'yes' or 'no'.")

_REPLACE_MARKER = re.compile(r'___(PORTFOLIO|PRICE|APR)_REPLACE___')

def render_farming_strategy_prompt(portfolio: str, price: str, apr: str) -> str:
    """Fill the strategy template in a single pass, so input text is never re-substituted"""
    values = {'PORTFOLIO': portfolio, 'PRICE': price, 'APR': apr}
    return _REPLACE_MARKER.sub(lambda match: values[match.group(1)], FARMING_STRATEGY_PROMPT)
