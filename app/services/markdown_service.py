import markdown

class MarkdownService:
    def __init__(self):
        self.extensions = [
            'extra',
            'admonition',
            'codehilite',
            'nl2br',
            'sane_lists',
            'toc',
        ]
    
    def convert_to_html(self, markdown_text: str) -> str:
        """Конвертирует Markdown в HTML"""
        if not markdown_text:
            return ""
        # Markdown хранит состояние между вызовами, поэтому экземпляр на каждый текст
        return markdown.markdown(markdown_text, extensions=self.extensions)
