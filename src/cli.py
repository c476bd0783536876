"""
textseal CLI

Commands:
  text sign      - Sign a message with a private/shared key
  text verify    - Verify a signed message
  text generate  - Generate a new signing key
  text encrypt   - Encrypt a message into a text envelope
  text decrypt   - Decrypt a text envelope
  genpass        - Generate a random password
  base64         - Base64 encode/decode
  serve          - Run the HTTP API

Inputs default to "-" (stdin). A value that is not an existing file is
treated as the literal message unless --strict-input is given.
"""

import argparse
import sys

import structlog

from core.b64 import Base64Format, decode_input, encode_input, urlsafe_encode
from core.config import Settings
from core.exceptions import TextSealError
from core.genpass import DEFAULT_LENGTH, generate_password
from core.log import configure_logging
from sealing import text
from sealing.formats import EncryptFormat, SignFormat

logger = structlog.get_logger()


def _allow_literal(args) -> bool:
    return not args.strict_input and Settings.from_env().allow_literal_input


def cmd_sign(args):
    """Sign input and print the URL-safe base64 signature."""
    signature = text.sign(args.input, args.key, args.format, allow_literal=_allow_literal(args))
    print(urlsafe_encode(signature))


def cmd_verify(args):
    """Verify a signature and print true/false."""
    valid = text.verify(
        args.input, args.key, args.sig, args.format, allow_literal=_allow_literal(args)
    )
    print("true" if valid else "false")


def cmd_generate(args):
    """Generate keys and write them into the output directory."""
    keys = text.generate_keys(args.format)
    for path in text.write_keys(args.format, args.output, keys):
        print(f"Wrote {path}")


def cmd_encrypt(args):
    """Encrypt input and print the text envelope."""
    envelope = text.encrypt(args.input, args.key, args.format, allow_literal=_allow_literal(args))
    print(envelope.decode("ascii"))


def cmd_decrypt(args):
    """Decrypt an envelope and write the plaintext to stdout."""
    plaintext = text.decrypt(args.input, args.key, args.format, allow_literal=_allow_literal(args))
    sys.stdout.buffer.write(plaintext)
    sys.stdout.buffer.flush()


def cmd_genpass(args):
    """Generate a random password."""
    try:
        password = generate_password(
            length=args.length,
            uppercase=not args.no_uppercase,
            lowercase=not args.no_lowercase,
            number=not args.no_number,
            symbol=not args.no_symbol,
        )
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)
    print(password)


def cmd_base64_encode(args):
    """Base64-encode input."""
    print(encode_input(args.input, args.format, allow_literal=_allow_literal(args)))


def cmd_base64_decode(args):
    """Base64-decode input and write the raw bytes to stdout."""
    try:
        decoded = decode_input(args.input, args.format, allow_literal=_allow_literal(args))
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)
    sys.stdout.buffer.write(decoded)
    sys.stdout.buffer.flush()


def cmd_serve(args):
    """Run the HTTP API."""
    import uvicorn

    settings = Settings.from_env()
    host = args.host or settings.host
    port = args.port or settings.port

    print(f"Starting textseal API on {host}:{port}", file=sys.stderr)

    uvicorn.run(
        "api.server:app",
        host=host,
        port=port,
        reload=args.reload,
    )


def _sign_format(token: str) -> SignFormat:
    try:
        return SignFormat.parse(token)
    except ValueError as e:
        raise argparse.ArgumentTypeError(str(e))


def _encrypt_format(token: str) -> EncryptFormat:
    try:
        return EncryptFormat.parse(token)
    except ValueError as e:
        raise argparse.ArgumentTypeError(str(e))


def _base64_format(token: str) -> Base64Format:
    try:
        return Base64Format.parse(token)
    except ValueError as e:
        raise argparse.ArgumentTypeError(str(e))


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="textseal",
        description="textseal - sign, verify, encrypt and decrypt text",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("--strict-input", action="store_true",
                        help="Fail on missing input files instead of treating them as literal text")
    parser.add_argument("--log-level", default=None, help="Log level (default: TEXTSEAL_LOG_LEVEL or INFO)")

    subparsers = parser.add_subparsers(dest="command", help="Commands")

    # text
    text_parser = subparsers.add_parser("text", help="Text sign/verify/encrypt/decrypt")
    text_sub = text_parser.add_subparsers(dest="text_command")

    sign_parser = text_sub.add_parser("sign", help="Sign a message with a private/shared key")
    sign_parser.add_argument("-i", "--input", default="-")
    sign_parser.add_argument("-k", "--key", required=True)
    sign_parser.add_argument("--format", type=_sign_format, default=SignFormat.BLAKE3)
    sign_parser.set_defaults(func=cmd_sign)

    verify_parser = text_sub.add_parser("verify", help="Verify a signed message")
    verify_parser.add_argument("-i", "--input", default="-")
    verify_parser.add_argument("-k", "--key", required=True)
    verify_parser.add_argument("--format", type=_sign_format, default=SignFormat.BLAKE3)
    verify_parser.add_argument("-s", "--sig", required=True, help="URL-safe base64 signature")
    verify_parser.set_defaults(func=cmd_verify)

    generate_parser = text_sub.add_parser("generate", help="Generate a new key")
    generate_parser.add_argument("--format", type=_sign_format, default=SignFormat.BLAKE3)
    generate_parser.add_argument("-o", "--output", required=True, help="Output directory")
    generate_parser.set_defaults(func=cmd_generate)

    encrypt_parser = text_sub.add_parser("encrypt", help="Encrypt message")
    encrypt_parser.add_argument("-i", "--input", default="-")
    encrypt_parser.add_argument("-k", "--key", required=True)
    encrypt_parser.add_argument("--format", type=_encrypt_format, default=EncryptFormat.CHACHA20POLY1305)
    encrypt_parser.set_defaults(func=cmd_encrypt)

    decrypt_parser = text_sub.add_parser("decrypt", help="Decrypt message")
    decrypt_parser.add_argument("-i", "--input", default="-")
    decrypt_parser.add_argument("-k", "--key", required=True)
    decrypt_parser.add_argument("--format", type=_encrypt_format, default=EncryptFormat.CHACHA20POLY1305)
    decrypt_parser.set_defaults(func=cmd_decrypt)

    # genpass
    genpass_parser = subparsers.add_parser("genpass", help="Generate a random password")
    genpass_parser.add_argument("-l", "--length", type=int, default=DEFAULT_LENGTH)
    genpass_parser.add_argument("--no-uppercase", action="store_true")
    genpass_parser.add_argument("--no-lowercase", action="store_true")
    genpass_parser.add_argument("--no-number", action="store_true")
    genpass_parser.add_argument("--no-symbol", action="store_true")
    genpass_parser.set_defaults(func=cmd_genpass)

    # base64
    b64_parser = subparsers.add_parser("base64", help="Base64 encode/decode")
    b64_sub = b64_parser.add_subparsers(dest="base64_command")

    encode_parser = b64_sub.add_parser("encode", help="Encode input")
    encode_parser.add_argument("-i", "--input", default="-")
    encode_parser.add_argument("--format", type=_base64_format, default=Base64Format.STANDARD)
    encode_parser.set_defaults(func=cmd_base64_encode)

    decode_parser = b64_sub.add_parser("decode", help="Decode input")
    decode_parser.add_argument("-i", "--input", default="-")
    decode_parser.add_argument("--format", type=_base64_format, default=Base64Format.STANDARD)
    decode_parser.set_defaults(func=cmd_base64_decode)

    # serve
    serve_parser = subparsers.add_parser("serve", help="Run the HTTP API")
    serve_parser.add_argument("--host", default=None)
    serve_parser.add_argument("--port", type=int, default=None)
    serve_parser.add_argument("--reload", action="store_true")
    serve_parser.set_defaults(func=cmd_serve)

    return parser


def main(argv=None):
    parser = build_parser()
    args = parser.parse_args(argv)

    configure_logging(args.log_level or Settings.from_env().log_level)

    func = getattr(args, "func", None)
    if func is None:
        parser.print_help()
        return

    try:
        func(args)
    except (TextSealError, OSError) as e:
        logger.error("command_failed", command=args.command, error=str(e))
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
