"""
Script untuk generate signing secret yang aman untuk SecureAuth API.
"""

import secrets
from pathlib import Path
from typing import Dict


PLACEHOLDER_MARKERS = ("your-", "change-me")


def generate_secret_key(num_bytes: int = 64) -> str:
    """Generate random URL-safe secret key."""
    return secrets.token_urlsafe(num_bytes)


def generate_all_keys() -> Dict[str, str]:
    """Generate all required security keys."""
    return {
        "JWT_SECRET_KEY": generate_secret_key(64),
    }


def is_placeholder(line: str) -> bool:
    """Check apakah baris .env masih berisi placeholder atau kosong."""
    value = line.split("=", 1)[1].strip()
    return not value or value in ('""', "''") or any(marker in value for marker in PLACEHOLDER_MARKERS)


def update_env_file(env_path: Path = Path(".env")) -> None:
    """Isi key yang kosong atau masih placeholder di file .env."""
    if not env_path.exists():
        print(f".env file not found at {env_path}")
        return

    lines = env_path.read_text().splitlines(keepends=True)
    keys = generate_all_keys()
    seen = set()

    updated_lines = []
    for line in lines:
        key_name = line.split("=", 1)[0].strip()
        if key_name in keys and "=" in line:
            seen.add(key_name)
            if is_placeholder(line):
                updated_lines.append(f'{key_name}="{keys[key_name]}"\n')
                print(f"Updated {key_name}")
                continue
        updated_lines.append(line)

    for key_name in keys.keys() - seen:
        updated_lines.append(f'{key_name}="{keys[key_name]}"\n')
        print(f"Added {key_name}")

    env_path.write_text("".join(updated_lines))

    print(f"\nUpdated .env file: {env_path}")
    print("IMPORTANT: Keep these keys secret and secure!")


def main():
    """Main function."""
    print("SecureAuth API Key Generator")
    print("=" * 50)

    env_path = Path(".env")

    if env_path.exists():
        response = input("\n.env file exists. Update missing/placeholder keys? (y/n): ")
        if response.lower() == 'y':
            update_env_file(env_path)
            return

    print("\nGenerated keys:")
    print("=" * 50)
    for key_name, key_value in generate_all_keys().items():
        print(f'{key_name}="{key_value}"')
    print("=" * 50)


if __name__ == "__main__":
    main()
