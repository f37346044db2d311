"""Protocol constants.

Keep these in one place to avoid stringly-typed message handling.
"""

# Reserved channel events.
JOIN = "phx_join"
REPLY = "phx_reply"

# Heartbeats travel on their own reserved topic, with no ref.
SYSTEM_TOPIC = "phoenix"
HEARTBEAT = "heartbeat"

# Reply payload status for success; anything else is a failure.
OK = "ok"

# WebSocket close codes that the reconnect policy treats specially.
CLIENT_CLOSE = 3001
ABNORMAL_CLOSE = 1006
