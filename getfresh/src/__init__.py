"""
GetFresh polling daemon package.

Authenticates against the (unofficial) GetFresh energy API, discovers the
account's resource links, polls tariff and meter-reading data on independent
timers, and publishes the extracted values to a local key-value store.

CHANGELOG:
- 2026-10-18: Initial creation

TODO:
- None
"""
