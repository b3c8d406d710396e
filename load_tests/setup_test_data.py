#!/usr/bin/env python3
"""
부하 테스트용 상품 생성 스크립트

locust 실행 전에 한정 재고 상품을 만들어 둡니다. 생성된 상품은 재고가 많은 순으로
목록 맨 앞에 오므로 locustfile의 사용자들이 같은 상품을 두고 경쟁합니다.

사용 예:
    python load_tests/setup_test_data.py --host http://localhost:8000 --stock 100
    python load_tests/setup_test_data.py --preset flash_sale
"""

import argparse
import sys

import requests

PRESETS = {
    # 100명이 재고 100개를 나눠 가짐
    "basic": ("Basic Test Soap", 100),
    # 1000명이 재고 100개를 두고 경쟁
    "flash_sale": ("Flash Sale Limited Edition", 100),
}


def server_is_up(base_url: str) -> bool:
    try:
        return requests.get(f"{base_url}/health", timeout=5).ok
    except requests.exceptions.RequestException:
        return False


def seed_product(base_url: str, name: str, stock: int) -> str:
    """
    한정 재고 상품을 생성하고 ID를 반환합니다.

    Raises:
        SystemExit: 생성에 실패한 경우
    """
    payload = {
        "img": "https://cdn.example.com/loadtest.png",
        "name": name,
        "category": "loadtest",
        "description": [f"{stock} units for load testing"],
        "price": 100,
        "stock": stock,
    }
    response = requests.post(f"{base_url}/products", json=payload, timeout=10)
    if response.status_code != 201:
        sys.exit(f"Could not create '{name}': {response.status_code} {response.text}")

    product_id = response.json()["insertedId"]
    print(f"{name}: id={product_id} stock={stock}")
    return product_id


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Seed limited-stock products for locust")
    parser.add_argument("--host", default="http://localhost:8000")
    parser.add_argument("--preset", choices=sorted(PRESETS), default="basic")
    parser.add_argument(
        "--stock",
        type=int,
        help="Override the preset stock",
    )
    return parser.parse_args()


def main():
    args = parse_args()

    if not server_is_up(args.host):
        sys.exit(f"No API server at {args.host} (GET /health failed)")

    name, stock = PRESETS[args.preset]
    seed_product(args.host, name, args.stock if args.stock is not None else stock)

    print(f"Run: locust -f load_tests/locustfile.py --host={args.host}")


if __name__ == "__main__":
    main()
