"""TradingView embed configurations rendered into the dashboard and stock pages."""

from __future__ import annotations

TV_SCRIPT_BASE = "https://s3.tradingview.com/external-embedding/embed-widget"

_TECH_SYMBOLS = [
    ("NASDAQ:AAPL", "Apple"),
    ("NASDAQ:GOOGL", "Alphabet"),
    ("NASDAQ:MSFT", "Microsoft"),
    ("NASDAQ:META", "Meta Platforms"),
    ("NYSE:ORCL", "Oracle Corp"),
    ("NASDAQ:INTC", "Intel Corp"),
]
_FINANCIAL_SYMBOLS = [
    ("NYSE:JPM", "JPMorgan Chase"),
    ("NYSE:WFC", "Wells Fargo Co New"),
    ("NYSE:BAC", "Bank Amer Corp"),
    ("NYSE:HSBC", "Hsbc Hldgs Plc"),
    ("NYSE:C", "Citigroup Inc"),
    ("NYSE:MA", "Mastercard Incorporated"),
]
_SERVICES_SYMBOLS = [
    ("NASDAQ:AMZN", "Amazon"),
    ("NYSE:BABA", "Alibaba Group Hldg Ltd"),
    ("NYSE:T", "At&t Inc"),
    ("NYSE:WMT", "Walmart"),
    ("NYSE:V", "Visa"),
]
_GROUPS = [
    ("Financial", _FINANCIAL_SYMBOLS),
    ("Technology", _TECH_SYMBOLS),
    ("Services", _SERVICES_SYMBOLS),
]

MARKET_OVERVIEW_WIDGET_CONFIG = {
    "colorTheme": "dark",
    "dateRange": "12M",
    "locale": "en",
    "largeChartUrl": "",
    "isTransparent": True,
    "showFloatingTooltip": True,
    "plotLineColorGrowing": "#0FEDBE",
    "plotLineColorFalling": "#0FEDBE",
    "gridLineColor": "rgba(240, 243, 250, 0)",
    "scaleFontColor": "#DBDBDB",
    "belowLineFillColorGrowing": "rgba(41, 98, 255, 0.12)",
    "belowLineFillColorFalling": "rgba(41, 98, 255, 0.12)",
    "belowLineFillColorGrowingBottom": "rgba(41, 98, 255, 0)",
    "belowLineFillColorFallingBottom": "rgba(41, 98, 255, 0)",
    "symbolActiveColor": "rgba(15, 237, 190, 0.05)",
    "tabs": [
        {"title": title, "symbols": [{"s": s, "d": d} for s, d in symbols]}
        for title, symbols in _GROUPS
    ],
    "support_host": "https://www.tradingview.com",
    "backgroundColor": "#141414",
    "width": "100%",
    "height": 600,
    "showSymbolLogo": True,
    "showChart": True,
}

HEATMAP_WIDGET_CONFIG = {
    "dataSource": "SPX500",
    "blockSize": "market_cap_basic",
    "blockColor": "change",
    "grouping": "sector",
    "isTransparent": True,
    "locale": "en",
    "symbolUrl": "",
    "colorTheme": "dark",
    "exchanges": [],
    "hasTopBar": False,
    "isDataSetEnabled": False,
    "isZoomEnabled": True,
    "hasSymbolTooltip": True,
    "isMonoSize": False,
    "width": "100%",
    "height": "600",
}

TOP_STORIES_WIDGET_CONFIG = {
    "displayMode": "regular",
    "feedMode": "market",
    "colorTheme": "dark",
    "isTransparent": True,
    "locale": "en",
    "market": "stock",
    "width": "100%",
    "height": "600",
}

MARKET_DATA_WIDGET_CONFIG = {
    "title": "Stocks",
    "width": "100%",
    "height": 600,
    "locale": "en",
    "showSymbolLogo": True,
    "colorTheme": "dark",
    "isTransparent": False,
    "backgroundColor": "#0F0F0F",
    "symbolsGroups": [
        {"name": name, "symbols": [{"name": s, "displayName": d} for s, d in symbols]}
        for name, symbols in _GROUPS
    ],
}


def symbol_info_widget_config(symbol: str) -> dict:
    return {
        "symbol": symbol.upper(),
        "colorTheme": "dark",
        "isTransparent": True,
        "locale": "en",
        "width": "100%",
        "height": 170,
    }


def candle_chart_widget_config(symbol: str) -> dict:
    return {
        "allow_symbol_change": False,
        "calendar": False,
        "details": True,
        "hide_side_toolbar": True,
        "hide_top_toolbar": False,
        "hide_legend": False,
        "hide_volume": False,
        "interval": "D",
        "locale": "en",
        "save_image": False,
        "style": 1,
        "symbol": symbol.upper(),
        "theme": "dark",
        "timezone": "Etc/UTC",
        "backgroundColor": "#141414",
        "gridColor": "#141414",
        "watchlist": [],
        "withdateranges": False,
        "studies": [],
        "width": "100%",
        "height": 600,
    }


def baseline_widget_config(symbol: str) -> dict:
    config = candle_chart_widget_config(symbol)
    config["style"] = 10
    return config


def technical_analysis_widget_config(symbol: str) -> dict:
    return {
        "symbol": symbol.upper(),
        "colorTheme": "dark",
        "isTransparent": True,
        "locale": "en",
        "width": "100%",
        "height": 400,
        "interval": "1h",
        "largeChartUrl": "",
    }


def company_profile_widget_config(symbol: str) -> dict:
    return {
        "symbol": symbol.upper(),
        "colorTheme": "dark",
        "isTransparent": True,
        "locale": "en",
        "width": "100%",
        "height": 440,
    }


def company_financials_widget_config(symbol: str) -> dict:
    return {
        "symbol": symbol.upper(),
        "colorTheme": "dark",
        "isTransparent": True,
        "locale": "en",
        "width": "100%",
        "height": 464,
        "displayMode": "regular",
        "largeChartUrl": "",
    }


def dashboard_widgets() -> list[dict]:
    return [
        {"title": "Market Overview", "script": f"{TV_SCRIPT_BASE}-market-overview.js", "config": MARKET_OVERVIEW_WIDGET_CONFIG, "height": 400},
        {"title": "Stock Heatmap", "script": f"{TV_SCRIPT_BASE}-stock-heatmap.js", "config": HEATMAP_WIDGET_CONFIG, "height": 400},
        {"title": None, "script": f"{TV_SCRIPT_BASE}-timeline.js", "config": TOP_STORIES_WIDGET_CONFIG, "height": 400},
        {"title": None, "script": f"{TV_SCRIPT_BASE}-market-quotes.js", "config": MARKET_DATA_WIDGET_CONFIG, "height": 400},
    ]


def stock_widgets(symbol: str) -> dict[str, list[dict]]:
    return {
        "left": [
            {"script": f"{TV_SCRIPT_BASE}-symbol-info.js", "config": symbol_info_widget_config(symbol), "height": 170},
            {"script": f"{TV_SCRIPT_BASE}-advanced-chart.js", "config": candle_chart_widget_config(symbol), "height": 600},
            {"script": f"{TV_SCRIPT_BASE}-advanced-chart.js", "config": baseline_widget_config(symbol), "height": 600},
        ],
        "right": [
            {"script": f"{TV_SCRIPT_BASE}-technical-analysis.js", "config": technical_analysis_widget_config(symbol), "height": 400},
            {"script": f"{TV_SCRIPT_BASE}-symbol-profile.js", "config": company_profile_widget_config(symbol), "height": 440},
            {"script": f"{TV_SCRIPT_BASE}-financials.js", "config": company_financials_widget_config(symbol), "height": 464},
        ],
    }
