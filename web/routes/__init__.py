"""
API 라우트 패키지

각 기능별 라우터 모듈:
- health: 헬스 체크
- auth: 가입/로그인/Google 로그인
- accounts: 계좌 CRUD
- transactions: 거래 조회 및 생성/수정/삭제
"""
