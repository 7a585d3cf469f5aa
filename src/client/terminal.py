"""
Terminal front end: 컨트롤러의 뷰 모델을 터미널에 출력.

명령:
- /cats  猫 다시 선택
- /quit  종료
"""

import asyncio

from src.client.controller import ChatController
from src.client.session import Sender, TranscriptEntry

PROMPT_CHOOSE = "話したい猫の番号を入力してください:"
COMMAND_SWITCH = "/cats"
COMMAND_QUIT = "/quit"

_SENDER_LABELS = {
    Sender.USER: "あなた",
    Sender.SYSTEM: "system",
}


def format_entry(entry: TranscriptEntry, cat_name: str = "") -> str:
    """대화창 항목 → 터미널 출력 문자열."""
    label = _SENDER_LABELS.get(entry.sender, cat_name or "猫")
    lines = [f"[{label}] {entry.text}"]
    for image in entry.images:
        lines.append(f"  🖼 {image}")
    return "\n".join(lines)


class TerminalChat:
    """터미널 채팅 루프."""

    def __init__(self, controller: ChatController):
        self.controller = controller

    async def _input(self, prompt: str) -> str:
        return await asyncio.to_thread(input, prompt)

    def _print_new(self, start: int) -> int:
        session = self.controller.session
        name = session.persona.name if session.persona else ""
        for entry in session.transcript[start:]:
            print(format_entry(entry, name))
        return len(session.transcript)

    async def choose_cat(self) -> bool:
        """猫 선택. 선택할 猫가 없으면 False."""
        picker = self.controller.picker
        if not picker:
            return False

        for index, item in enumerate(picker, start=1):
            print(f"{index}. {item.name} – {item.description}")
        while True:
            selection = (await self._input(f"{PROMPT_CHOOSE} ")).strip()
            if selection.isdigit() and 1 <= int(selection) <= len(picker):
                self.controller.select(picker[int(selection) - 1].id)
                return True

    async def run(self) -> None:
        await self.controller.load_catalog()
        self._print_new(0)

        if not await self.choose_cat():
            return
        shown = self._print_new(0)

        while True:
            text = (await self._input(f"{self.controller.session.placeholder}> ")).strip()
            if text == COMMAND_QUIT:
                return
            if text == COMMAND_SWITCH:
                await self.choose_cat()
                shown = self._print_new(0)
                continue

            await self.controller.submit(text)
            shown = self._print_new(shown)
