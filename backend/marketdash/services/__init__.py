from marketdash.services.base import SourceAdapter
from marketdash.services.coincap import CoinCapAdapter
from marketdash.services.coingecko import CoinGeckoAdapter
from marketdash.services.jsonplaceholder import JSONPlaceholderAdapter
from marketdash.services.openweather import OpenWeatherAdapter
from marketdash.services.static_data import StaticDataAdapter

__all__ = [
    "CoinCapAdapter",
    "CoinGeckoAdapter",
    "JSONPlaceholderAdapter",
    "OpenWeatherAdapter",
    "SourceAdapter",
    "StaticDataAdapter",
]
