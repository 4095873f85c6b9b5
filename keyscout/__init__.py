"""
KeyScout - i18n Key and Hard-String Scanner
===========================================

Static analysis helpers for localizing web front-end code:
- Finds translation keys referenced by existing t()/$t()/i18nKey usages
- Detects hard-coded user-facing strings in Vue, HTML, JS/TS and JSX/TSX
- Framework profiles for vue-i18n, react-i18next and i18next, plus custom ones
- Renders replacement calls for extracted strings

License: MIT
"""

__version__ = "0.3.0"
