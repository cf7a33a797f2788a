"""
例外の分類。

- 入力値が適用範囲外 → 例外ではなく NaN を返す（ここには定義しない）
- ConvergenceError → 着衣表面温度の反復が収束しない。呼び出し側で NaN に落とす
- UsageError 系 → 呼び出し方の誤り。その場で送出して処理を止める
"""


class ComfortNxError(Exception):
    pass


class ConvergenceError(ComfortNxError):
    pass


class UsageError(ComfortNxError, ValueError):
    pass


class ArrayLengthError(UsageError):
    pass


class OptionError(UsageError):
    pass


__all__ = ["ComfortNxError", "ConvergenceError", "UsageError", "ArrayLengthError", "OptionError"]
