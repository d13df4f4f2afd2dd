# mindspace/main.py  (통합 엔트리포인트)
from dotenv import load_dotenv

# 루트 .env 로딩 (backend 설정이 import 시점에 읽히므로 먼저 로딩)
load_dotenv()

from mindspace.backend.main import app as app  # noqa: E402,F401
