import re

from .error import PrintableError

# $NAME or ${NAME}. Anything else starting with "${" is malformed.
NAME_EXPR = r'[A-Za-z0-9_.]+'
PLACEHOLDER_EXPR = re.compile(r'\$(?:(' + NAME_EXPR + r')|\{([^}]*)(\}?))')


def expand(text, environment):
    '''Substitute $NAME and ${NAME} placeholders in text with values from the
    build environment. Unknown names are left alone, the way the CI runtime
    does it. Malformed placeholders and a missing environment raise
    ExpansionError.'''
    if environment is None:
        raise ExpansionError('No build environment is available.')

    def replace(match):
        bare_name, braced_name, closing = match.groups()
        if bare_name is not None:
            name = bare_name
        else:
            if not closing:
                raise ExpansionError(
                    'Unterminated placeholder "{}" at position {}.',
                    match.group(0), match.start())
            if not re.fullmatch(NAME_EXPR, braced_name):
                raise ExpansionError('Invalid parameter name "{}".',
                                     braced_name)
            name = braced_name
        if name not in environment:
            return match.group(0)
        return str(environment[name])

    return PLACEHOLDER_EXPR.sub(replace, text)


def expand_or_literal(text, environment, display):
    '''A build should never fail just because expansion failed. Log the problem
    and hand back the original text, which will at worst fail a later
    existence check with a clear message.'''
    try:
        return expand(text, environment)
    except ExpansionError as e:
        display.info(
            'Failed to resolve parameters in string "{}" due to following '
            'error:\n{}'.format(text, e.message))
    return text


class ExpansionError(PrintableError):
    pass
