"""
Typeflag token helpers: split one raw argument into its name and raw value.

Accepted shapes
- '--name=value' / '-n=value'  → name 'name' / 'n', value 'value'
- '--verbose' / '-v'           → name 'verbose' / 'v', value ''

Both helpers are pure and total: they never raise, and the empty string is the
only "nothing here" signal (an empty name means the token is not an option).
"""


def name(token, /):
    """
    Return the option name of a raw argument token.

    Rules
    - tokens of length <= 1, or not starting with '-', have no name ('').
    - one leading '-' is skipped; a second one is skipped too when the token is
      longer than two characters ('--' alone therefore yields '').
    - the name stops before the first '=', or at the end of the token.

    Examples
    - name("--path=data.yaml") -> "path"
    - name("-p=data.yaml")     -> "p"
    - name("-v")               -> "v"
    - name("data.yaml")        -> ""
    """
    if len(token) <= 1 or token[0] != "-":
        return ""

    start = 2 if len(token) > 2 and token[1] == "-" else 1
    end = token.find("=")
    if end < 0:
        end = len(token)
    return token[start:end]


def value(token, /):
    """
    Return the raw text after the first '=' of a token, or '' when there is none.

    Examples
    - value("--path=data.yaml") -> "data.yaml"
    - value("-n=5")             -> "5"
    - value("-n=")              -> ""
    - value("-v")               -> ""
    """
    _, equals, rest = token.partition("=")
    return rest if equals else ""


__all__ = (
    "name",
    "value",
)
