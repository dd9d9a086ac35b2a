"""
Static LaTeX text emitted around the mixed questions.

The preamble and closing marker are constant across runs; the directive
templates are filled in per code and per part by the reconstructor.
"""

from __future__ import annotations

from .models import QuestionType

PREAMBLE = (
    "\\documentclass[12pt,a4paper]{article}\n"
    "\\usepackage[light,condensed,math]{anttor}\n"
    "\\usepackage{amsmath,amssymb,tasks,graphicx,geometry}\n"
    "\\usepackage[utf8]{vietnam}\n"
    "\\usepackage[dethi]{ex_test}\n"
    "\\geometry{top=1.5cm, bottom=1.5cm, left=2cm, right=1.5cm}\n"
    "\\begin{document}\n"
)

CLOSING = "\\end{document}\n"

CODE_HEADER = (
    "%%%%%%%%%%%%%%%%%%%%%%%% MÃ ĐỀ {code} %%%%%%%%%%%%%%%%%%%%%%%%\n"
    "\\newpage\n"
    "\\begin{{center}}\n"
    "\\textbf{{MÃ ĐỀ THI: {code}}}\n"
    "\\end{{center}}\n"
)

PART_INTRO = (
    "\\setcounter{{ex}}{{0}}\n"
    "\\noindent\\textbf{{PHẦN {numeral}. {title}}} "
    "Thí sinh trả lời từ câu 1 đến câu {count}.\n"
)

PART_INTRO_EMPTY = (
    "\\setcounter{{ex}}{{0}}\n"
    "\\noindent\\textbf{{PHẦN {numeral}. {title}}} "
    "Phần này không có câu hỏi.\n"
)

OPEN_ANSWER_FILE = "\\Opensolutionfile{{ans}}[{file_id}]\n"
CLOSE_ANSWER_FILE = "\\Closesolutionfile{ans}\n"

APPENDIX_HEADER = (
    "\\newpage\n"
    "\\begin{center}\n"
    "\\textbf{BẢNG ĐÁP ÁN}\n"
    "\\end{center}\n"
)

APPENDIX_CODE_LABEL = "\\noindent\\textbf{{Mã đề {code}}}\\\\\n"

RENDER_ANSWERS = "\\inputansbox{{{columns}}}{{{file_id}}}\n"

FILE_ID = "ans{code}-P{part}"

PART_NUMERALS = {1: "I", 2: "II", 3: "III"}

PART_TITLES = {
    QuestionType.MULTIPLE_CHOICE: "Câu trắc nghiệm nhiều phương án lựa chọn.",
    QuestionType.TRUE_FALSE: "Câu trắc nghiệm đúng sai.",
    QuestionType.SHORT_ANSWER: "Câu trắc nghiệm trả lời ngắn.",
}

# Columns of the recorded-answer table per part
ANSWER_COLUMNS = {
    QuestionType.MULTIPLE_CHOICE: 9,
    QuestionType.TRUE_FALSE: 2,
    QuestionType.SHORT_ANSWER: 6,
}

QUESTION_SEPARATOR = "\n\n"

TF_TRUE = "Đ"
TF_FALSE = "S"
OPTION_LETTERS = "ABCD"


def file_id(code: str, part: int) -> str:
    return FILE_ID.format(code=code, part=part)
