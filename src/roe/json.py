''' Wrapper module to select the most performant available library to handle
    the equivalent of :func:`json.loads` and :func:`json.dumps`. Frames go
    on the wire as text, so :func:`dumps_text` is provided alongside the
    bytes-returning :func:`dumps`.
'''

# Conditional imports keep the fallbacks from being loaded when the
# preferred library is present. msgspec is a declared dependency; orjson
# and the standard library are only used if it is missing.

msgspec = None
orjson = None
json = None

try:
    import msgspec
except ImportError:
    pass

if msgspec is None:
    try:
        import orjson
    except ImportError:
        pass

if msgspec is None and orjson is None:
    import json


# msgspec and orjson both encode to bytes; the standard library fallback
# is coerced to match.

def json_dumps(value):
    return json.dumps(value, separators=(',', ':')).encode()

if msgspec is not None:
    encoder = msgspec.json.Encoder()
    decoder = msgspec.json.Decoder()
    dumps = encoder.encode
    loads = decoder.decode
    DecodeError = msgspec.DecodeError
elif orjson is not None:
    dumps = orjson.dumps
    loads = orjson.loads
    DecodeError = orjson.JSONDecodeError
else:
    dumps = json_dumps
    loads = json.loads
    DecodeError = json.JSONDecodeError


def dumps_text(value):
    """ Encode *value* as JSON and return it as a str.
    """

    return dumps(value).decode()

# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
