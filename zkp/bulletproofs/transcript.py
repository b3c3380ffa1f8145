"""
Fiat-Shamir Transcript
======================

비대화식(non-interactive) 변환을 위한 Fiat-Shamir 해싱 구현.

**Fiat-Shamir 변환이란?**
  대화식 프로토콜에서는 Verifier가 Prover의 커밋먼트를 받은 뒤 랜덤 챌린지를
  보낸다. Fiat-Shamir 변환은 이 대화를 해시 함수로 시뮬레이션한다:
  - Prover가 지금까지의 모든 메시지를 해시하여 챌린지를 직접 생성
  - Verifier도 같은 순서로 같은 데이터를 넣어 같은 챌린지를 재구성
  - 해시의 랜덤 오라클 모델 하에서 보안성이 보장됨

**셔플 증명에서의 챌린지 순서**:
  dom-sep, k          → 셔플 도메인 분리
  dom-sep "r1cs v1"   → R1CS 도메인 분리
  V × 2k              → 입력/출력 커밋먼트
  m, A_I1, A_O1, S1   → phase 1 종료
  "shuffle challenge" → z (순열 검사 평가점)
  A_I2, A_O2, S2      → phase 2 곱셈 커밋먼트
  y, z                → 제약 결합
  T₁, T₃..T₆          → t(x) 계수 커밋먼트
  u, x                → phase 결합 / 평가점
  w, 내적 증명 라운드 → 내적 논증

**인코딩**:
  모든 추가 연산은 (레이블 길이, 레이블, 데이터 길이, 데이터)를 기록한다.
  길이 접두사 덕분에 서로 다른 추가 순서가 같은 바이트열로 합쳐지지 않는다.

사용 예시:
    >>> t = Transcript(b"ShuffleProofTest")
    >>> t.append_message(b"dom-sep", b"ShuffleProof")
    >>> z = t.challenge_scalar(b"shuffle challenge")
"""

import hashlib

from zkp.bulletproofs.field import (
    FR, CURVE_ORDER, point_to_bytes, scalar_to_bytes,
)


class Transcript:
    """SHA-512 기반 Fiat-Shamir 트랜스크립트.

    속성:
        state: 현재까지 누적된 해시 입력 바이트열

    보안 주의:
        - 하나의 트랜스크립트는 하나의 증명 세션만 소유해야 한다
        - Prover와 Verifier는 같은 레이블로 초기화해야 한다
    """

    def __init__(self, label=b"shuffle"):
        """트랜스크립트를 초기화한다.

        Args:
            label: 프로토콜 도메인 분리용 레이블
        """
        self.state = bytearray()
        self.append_message(b"transcript", label)

    def append_message(self, label, message):
        """레이블이 붙은 바이트열을 추가한다."""
        self.state.extend(len(label).to_bytes(4, "big"))
        self.state.extend(label)
        self.state.extend(len(message).to_bytes(4, "big"))
        self.state.extend(message)

    def append_u64(self, label, value):
        """64비트 부호 없는 정수를 추가한다 (8바이트 빅엔디안)."""
        self.append_message(label, int(value).to_bytes(8, "big"))

    def append_scalar(self, label, scalar):
        """FR 스칼라를 32바이트 빅엔디안으로 추가한다."""
        if not isinstance(scalar, FR):
            scalar = FR(scalar)
        self.append_message(label, scalar_to_bytes(scalar))

    def append_point(self, label, point):
        """G1 점을 64바이트 (x || y)로 추가한다. 항등원은 0으로 채운다."""
        self.append_message(label, point_to_bytes(point))

    def challenge_scalar(self, label):
        """트랜스크립트로부터 챌린지 스칼라를 생성한다.

        현재 상태를 SHA-512로 해싱하여 FR 원소로 축소한다 (512비트를
        r로 줄이므로 편향은 무시할 수 있다). 생성된 다이제스트는 상태에
        다시 추가된다 (체이닝).

        Args:
            label: 바이트열 레이블 (예: b"y")

        Returns:
            FR: 챌린지 스칼라
        """
        self.append_message(b"challenge", label)
        h = hashlib.sha512(bytes(self.state)).digest()
        challenge = FR(int.from_bytes(h, "big") % CURVE_ORDER)

        self.append_message(b"digest", h)

        return challenge
