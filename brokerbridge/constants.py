"""
Broker Bridge Constants

This module consolidates the global constants and environment configuration
used throughout the codebase. Constants are organized by category for easy
reference and maintenance.
"""
import ast
from decimal import Decimal
from dotenv import dotenv_values

# =============================================================================
# ENVIRONMENT CONFIGURATION
# =============================================================================
# Load environment variables once at module import
_config = dotenv_values(".env")

SERVER_DEFAULTS = {
    'BROKER_HOST':                     '127.0.0.1',
    'BROKER_PORT':                     '3001',
}

LOGGER_DEFAULTS = {
    'LOG_LEVEL':                       'INFO',
    'LOG_FORMAT':                      '%(asctime)s - %(levelname)s - %(name)s - %(message)s',
    'LOG_DATE_FORMAT':                 '%Y-%m-%dT%H:%M:%S',
    'LOG_CONSOLE_HIGHLIGHTING':        'True',
    'LOG_FILE_OUTPUT':                 'True',
    'LOG_INCLUDE_REQUEST_CONTENT':     'False',
    'LOG_INCLUDE_RESPONSE_CONTENT':    'False',
}

LOG_MAX_FILE_SIZE = 10 * 1024 * 1024 # 10MB
LOG_MAX_PATH_LENGTH = 320  # Maximum URL length to log (truncates longer URLs)
LOG_BACKUP_COUNT = 5


# WARNING: THE VALUES BELOW ARE PART OF THE SIGNED SETTLEMENT FORMAT. THE HUB RECOMPUTES THE
# MESSAGE HASH AND VERIFIES THE TYPED-DATA SIGNATURE WITH EXACTLY THESE VALUES. CHANGING ANY
# OF THEM MAKES EVERY TRADE THIS BROKER SENDS UNVERIFIABLE.

# ==================================================================================
# SETTLEMENT FORMAT
# ==================================================================================
BROKER_VERSION = '1.0.0'

# Leading byte of the packed message hashed into the message id
ORDER_HASH_PREFIX = b'\x03'

# Fixed-point precision of amount, price and matcher fee
PRICE_DECIMALS = 8

# Scaled values are transported as signed 64-bit longs
MAX_SCALED_VALUE = 2 ** 63 - 1

MATCHER_FEE_RATE = Decimal('0.002')  # 0.2%

# Validity window of a settlement message, in milliseconds
DEFAULT_EXPIRATION = 29 * 24 * 60 * 60 * 1000

PAIR_SEPARATOR = '-'


# ==================================================================================
# TYPED-DATA SIGNING SCHEMA
# ==================================================================================
DOMAIN_TYPE = [
    {"name": "name", "type": "string"},
    {"name": "version", "type": "string"},
    {"name": "chainId", "type": "uint256"},
    {"name": "salt", "type": "bytes32"},
]

ORDER_TYPE = [
    {"name": "senderAddress", "type": "address"},
    {"name": "matcherAddress", "type": "address"},
    {"name": "baseAsset", "type": "address"},
    {"name": "quoteAsset", "type": "address"},
    {"name": "matcherFeeAsset", "type": "address"},
    {"name": "amount", "type": "uint64"},
    {"name": "price", "type": "uint64"},
    {"name": "matcherFee", "type": "uint64"},
    {"name": "nonce", "type": "uint64"},
    {"name": "expiration", "type": "uint64"},
    {"name": "buySide", "type": "uint8"},
]

DOMAIN_DATA = {
    "name": "Orion Exchange",
    "version": "1",
    "chainId": 3,
    "salt": "0xf2d857f4a3edcb9b78b4d503bfe733db1e3f6cdc2b7971ee739626c97e86a557",
}


# ==================================================================================
# DEFAULT ASSET TABLE
# ==================================================================================
DEFAULT_ASSETS = {
    'ETH':  '0x0000000000000000000000000000000000000000',
    'USDT': '0xfc1cd13a7f126efd823e373c4086f69beb8611c2',
    'ORN':  '0xfc25454ac2db9f6ab36bc0b0b034b41061c00982',
}


# ==================================================================================
# HUB PROTOCOL
# ==================================================================================
# Status token the hub returns for a fresh registration
HUB_STATUS_REGISTERED = 'REGISTERED'

# Error code of every envelope returned on the callback surface
CALLBACK_ERROR_CODE = 1000

# Path appended to the public callback URL when registering
CALLBACK_PREFIX = '/api'

# Network timeouts
CONNECTION_TIMEOUT = 10.0  # 10 seconds


# ==================================================================================
# CONFIGURATION WRAPPERS
# ==================================================================================
class ConfigString(str):
    """
    String subclass that stores a default value.
    """
    def __new__(cls, value, default):
        obj = str.__new__(cls, value)
        obj._default = default
        return obj

    def default(self):
        return self._default

class ConfigBool(int):
    """
    Int subclass acting as a boolean that stores a default value.
    """
    def __new__(cls, value, default):
        obj = int.__new__(cls, bool(value))
        obj._default = default
        return obj

    def default(self):
        return self._default

    def __repr__(self):
        return str(bool(self))

    def __str__(self):
        return str(bool(self))

    def __eq__(self, other):
        return bool(self) == other

    __hash__ = int.__hash__


# ==================================================================================
# DYNAMIC CONFIGURATION LOADING
# ==================================================================================
DEFAULTS = SERVER_DEFAULTS | LOGGER_DEFAULTS
namespace = globals()

def parse_bool(v):
    """
    Convert "True"/"False" (any casing, with surrounding whitespace) into bool.
    Only calls ast.literal_eval for known literals.
    """
    if not isinstance(v, str):
        return v
    s = v.strip()
    if not s:
        return v
    if s.casefold() in {"true", "false"}:
        return ast.literal_eval(s.title())
    return v

for key, default_raw in DEFAULTS.items():
    # dotenv_values returns strings or None. None is treated as missing.
    raw = _config.get(key)
    value_raw = default_raw if raw is None else raw

    value = parse_bool(value_raw)
    default_val = parse_bool(default_raw)

    if isinstance(value, bool):
        namespace[key] = ConfigBool(value, default_val)
    else:
        namespace[key] = ConfigString(value, default_val)

BROKER_PORT = int(namespace['BROKER_PORT'])
