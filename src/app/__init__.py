"""
App layer: 猫AIチャット 서버 (FastAPI).

역할:
- GET /cats: 페르소나 카탈로그
- POST /chat: 페르소나 지시문 조립 + Gemini 호출
- GET /: 브라우저 채팅 화면 (Jinja2 + static JS)

주의: 폴더 구분
- src/app/templates/ → Jinja2 HTML
- src/app/static/ → CSS, JS
- data/ (루트) → 페르소나 레코드
"""
