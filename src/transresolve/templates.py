"""Default file contents written by `transresolve init`."""

DEFAULT_CONFIG_YAML = """\
# TransResolve configuration.
# Strings must use single quotes.

dictionary:
  # Directory with <language>.json files, relative to the project root.
  directory: 'translations'
  language: 'en'
  # Optional overlay file <locale>.json whose entries replace the language file's.
  # locale: 'en_GB'

limits:
  max_nodes: 500
  max_replacements: 50
  max_pattern_matches: 200
  max_args: 50

render:
  # 'text' replaces patterns with their translation; 'chip' wraps them in removable chips (HTML only).
  mode: 'text'
  escape: false
  defer_unknown_keys: false

fallback:
  # One of: 'http', 'local', 'mock', 'none'.
  provider: 'none'
  # endpoint: 'https://example.com/wp-json/ct-custom/v1/resolve-translation'
  headers: {}
  timeout: 10.0
  debounce: 0.3
  retry_delay: 0.5
  max_retries: 1
  max_text_length: 2000
"""

EXAMPLE_DICTIONARY_JSON = """\
{
  "GREETING": {
    "one": "Hi ##name##",
    "other": "Hi all ##name##"
  },
  "WELCOME": "Welcome to ##site##"
}
"""
