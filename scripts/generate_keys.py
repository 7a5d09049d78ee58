"""
Script para generar el par de claves RSA (RS256) con que se verifican los JWT.
Solo hace falta si JWT_ALGORITHM=RS256 (valor por defecto):

    python scripts/generate_keys.py
    python scripts/generate_keys.py --out ./keys --force
"""

import argparse
from pathlib import Path

from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import rsa


def generate_rsa_keys(keys_dir: Path, force: bool = False) -> bool:
    keys_dir.mkdir(parents=True, exist_ok=True)
    private_key_path = keys_dir / "private.pem"
    public_key_path = keys_dir / "public.pem"

    if private_key_path.exists() and not force:
        print(f"⚠️  Las claves ya existen en {keys_dir} (usa --force para regenerarlas)")
        return False

    private_key = rsa.generate_private_key(public_exponent=65537, key_size=2048)

    private_key_path.write_bytes(
        private_key.private_bytes(
            encoding=serialization.Encoding.PEM,
            format=serialization.PrivateFormat.PKCS8,
            encryption_algorithm=serialization.NoEncryption(),
        )
    )
    public_key_path.write_bytes(
        private_key.public_key().public_bytes(
            encoding=serialization.Encoding.PEM,
            format=serialization.PublicFormat.SubjectPublicKeyInfo,
        )
    )
    print(f"✅ Claves generadas en {keys_dir}")
    print("\n📌 Agrega a tu .env:")
    print(f"   JWT_PRIVATE_KEY_PATH={private_key_path}")
    print(f"   JWT_PUBLIC_KEY_PATH={public_key_path}")
    return True


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Genera claves RSA para JWT")
    parser.add_argument("--out", type=Path, default=Path(__file__).parent.parent / "keys")
    parser.add_argument("--force", action="store_true", help="Sobrescribir claves existentes")
    args = parser.parse_args()
    generate_rsa_keys(args.out, force=args.force)
