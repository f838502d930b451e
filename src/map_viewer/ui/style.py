BASE_STYLESHEET = """
QLabel { color: #e5e7eb; }
QLabel#footerLabel { color: #9ca3af; }
QComboBox {
    background: #0f172a; border: 1px solid #1f2937; color: #e5e7eb; border-radius: 6px; padding: 4px 8px;
    min-width: 140px;
}
QComboBox QAbstractItemView {
    background: #0f172a; color: #e5e7eb; selection-background-color: #22d3ee; selection-color: #0b1220;
}
QWidget#controlPanel, QWidget#footer { background: #0b1220; }
"""
