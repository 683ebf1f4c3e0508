"""
Conversión de texto de campos a números.
- Enteros con prefijos 0x / 0o / 0b (mayúsculas o minúsculas) y radix 2-36.
- Flotantes con parte fraccionaria, exponente (e/E) y constantes inf / infinity / nan.
Las funciones nunca lanzan por texto inválido: devuelven None.
"""
from typing import Optional, Tuple

# Tabla de dígitos desde '0' hasta 'z' (bases hasta 36); -1 = no es dígito
_DIGIT_TABLE: Tuple[int, ...] = (
     0,  1,  2,  3,  4,  5,  6,  7,  8,  9, -1, -1, -1, -1, -1, -1,
    -1, 10, 11, 12, 13, 14, 15, 16, 17, 18, 19, 20, 21, 22, 23, 24,
    25, 26, 27, 28, 29, 30, 31, 32, 33, 34, 35, -1, -1, -1, -1, -1,
    -1, 10, 11, 12, 13, 14, 15, 16, 17, 18, 19, 20, 21, 22, 23, 24,
    25, 26, 27, 28, 29, 30, 31, 32, 33, 34, 35,
)
_TABLE_FIRST = ord('0')
_TABLE_LAST = ord('z')

_PREFIX_BASES = {'x': 16, 'o': 8, 'b': 2}

_INF = float("inf")

# Orden importa: la más larga primero
_FLOAT_CONSTANTS = (
    ("infinity", _INF),
    ("inf", _INF),
    ("nan", float("nan")),
)


def digit_value(char: str, base: int) -> Optional[int]:
    code = ord(char)
    if code < _TABLE_FIRST or code > _TABLE_LAST:
        return None
    digit = _DIGIT_TABLE[code - _TABLE_FIRST]
    if digit < 0 or digit >= base:
        return None
    return digit


def to_lower_ascii(char: str) -> Optional[str]:
    if 'A' <= char <= 'Z':
        return chr(ord(char) + 0x20)
    if 'a' <= char <= 'z':
        return char
    return None


def _trim(text: str) -> str:
    # Solo un carácter por lado (no recorta espacios múltiples)
    if text[:1] == ' ':
        text = text[1:]
    if text[-1:] in (' ', '\0'):
        text = text[:-1]
    return text


def _split_sign(text: str) -> Tuple[bool, str]:
    if text[:1] == '-':
        return True, text[1:]
    return False, text


def _wrap(value: int, bits: int) -> int:
    # Desbordamiento en complemento a dos, como un entero de ancho fijo
    modulus = 1 << bits
    half = modulus >> 1
    return (value + half) % modulus - half


def parse_integer(text: str, radix: int = 10, bits: Optional[int] = None) -> Optional[int]:
    """
    Convierte texto a entero.
    Un prefijo 0x / 0o / 0b reemplaza al radix recibido. El primer dígito inválido
    invalida todo el resultado. Con `bits` el resultado se trunca a ese ancho con signo.
    """
    if not 2 <= radix <= 36:
        raise ValueError(f"radix fuera de rango (2-36): {radix}")
    negative, digits = _split_sign(_trim(text))
    if not digits:
        return None

    base = radix
    if digits[0] == '0':
        if len(digits) == 1:
            return 0
        prefix_base = _PREFIX_BASES.get(to_lower_ascii(digits[1]) or '')
        if prefix_base is not None:
            base = prefix_base
            digits = digits[2:]
        else:
            # Sin prefijo el cero inicial no aporta valor; el resto se lee en la base activa
            digits = digits[1:]

    result = 0
    for char in digits:
        digit = digit_value(char, base)
        if digit is None:
            return None
        result = result * base + digit

    if negative:
        result = -result
    if bits is not None:
        result = _wrap(result, bits)
    return result


def _match_constant(text: str) -> Optional[float]:
    folded = []
    for char in text:
        lower = to_lower_ascii(char)
        if lower is None:
            return None
        folded.append(lower)
    word = "".join(folded)
    for name, value in _FLOAT_CONSTANTS:
        if word == name:
            return value
    return None


def parse_float(text: str) -> Optional[float]:
    """
    Convierte texto a flotante.
    - Parte entera: del dígito más significativo hacia adelante hasta el '.'
    - Parte fraccionaria: desde el final hacia atrás hasta el '.'
    - Exponente entero aplicado multiplicando / dividiendo por 10 repetidamente
    """
    negative, body = _split_sign(_trim(text))
    if not body:
        return None

    # Constantes: si empieza con 'i' o 'n' no puede ser un número
    if to_lower_ascii(body[0]) in ('i', 'n'):
        constant = _match_constant(body)
        if constant is None:
            return None
        return -constant if negative else constant

    # El exponente se busca desde el segundo carácter
    exp_pos = len(body)
    for i in range(1, len(body)):
        if to_lower_ascii(body[i]) == 'e':
            exp_pos = i
            break
    mantissa = body[:exp_pos]

    whole, _, fraction = mantissa.partition('.')
    result = 0.0
    for char in whole:
        digit = digit_value(char, 10)
        if digit is None:
            return None
        result = result * 10.0 + digit

    decimals = 0.0
    for char in reversed(fraction):
        digit = digit_value(char, 10)
        if digit is None:
            return None
        decimals = decimals / 10.0 + digit
    result += decimals / 10.0

    if exp_pos < len(body):
        exponent = parse_integer(body[exp_pos + 1:])
        if exponent is None:
            return None
        # Al llegar a 0 o inf el resultado ya no cambia
        while exponent > 0 and 0.0 < result < _INF:
            result *= 10.0
            exponent -= 1
        while exponent < 0 and 0.0 < result < _INF:
            result /= 10.0
            exponent += 1

    return -result if negative else result
