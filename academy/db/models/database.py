from typing import Any, Optional
import datetime
import decimal
import uuid

from sqlalchemy import JSON, Boolean, CheckConstraint, DateTime, ForeignKeyConstraint, Index, Integer, Numeric, PrimaryKeyConstraint, String, Text, UniqueConstraint, Uuid, text
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, relationship

from academy.libs.formats.datetime import now as get_now


class Base(DeclarativeBase):
    pass


class User(Base):
    __tablename__ = 'user'
    __table_args__ = (
        CheckConstraint("role IN ('USER', 'PARENT', 'TEACHER', 'ADMIN', 'SUPERVISOR')", name='user_role_check'),
        CheckConstraint('balance >= 0', name='user_balance_check'),
        PrimaryKeyConstraint('id', name='user_pk'),
        UniqueConstraint('phone_number', name='user_phone_number_key'),
        UniqueConstraint('email', name='user_email_key'),
        Index('idx_user_parent_phone', 'parent_phone_number'),
    )

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    full_name: Mapped[str] = mapped_column(String, nullable=False)
    phone_number: Mapped[str] = mapped_column(String, nullable=False)
    email: Mapped[str] = mapped_column(String, nullable=False)
    hashed_password: Mapped[str] = mapped_column(String, nullable=False)
    role: Mapped[str] = mapped_column(String, nullable=False, default='USER', server_default=text("'USER'"))
    parent_phone_number: Mapped[Optional[str]] = mapped_column(String)
    curriculum: Mapped[Optional[str]] = mapped_column(String)
    curriculum_type: Mapped[Optional[str]] = mapped_column(String)
    level: Mapped[Optional[str]] = mapped_column(String)
    language: Mapped[Optional[str]] = mapped_column(String)
    grade: Mapped[Optional[str]] = mapped_column(String)
    balance: Mapped[decimal.Decimal] = mapped_column(Numeric(12, 2), nullable=False, default=decimal.Decimal('0'), server_default=text('0'))
    points: Mapped[int] = mapped_column(Integer, nullable=False, default=0, server_default=text('0'))
    is_suspended: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False, server_default=text('false'))
    image_url: Mapped[Optional[str]] = mapped_column(String)
    last_login_at: Mapped[Optional[datetime.datetime]] = mapped_column(DateTime)
    created_at: Mapped[datetime.datetime] = mapped_column(DateTime, nullable=False, default=get_now)
    updated_at: Mapped[datetime.datetime] = mapped_column(DateTime, nullable=False, default=get_now, onupdate=get_now)

    sessions: Mapped[list['UserSession']] = relationship('UserSession', back_populates='user', passive_deletes=True)
    courses: Mapped[list['Course']] = relationship('Course', back_populates='owner', passive_deletes=True)
    purchases: Mapped[list['Purchase']] = relationship('Purchase', back_populates='user', passive_deletes=True)
    user_progress: Mapped[list['UserProgress']] = relationship('UserProgress', back_populates='user', passive_deletes=True)
    quiz_results: Mapped[list['QuizResult']] = relationship('QuizResult', back_populates='student', passive_deletes=True)
    subscriptions: Mapped[list['Subscription']] = relationship('Subscription', back_populates='user', passive_deletes=True)
    balance_transactions: Mapped[list['BalanceTransaction']] = relationship('BalanceTransaction', foreign_keys='[BalanceTransaction.user_id]', back_populates='user', passive_deletes=True)
    certificates: Mapped[list['Certificate']] = relationship('Certificate', foreign_keys='[Certificate.student_id]', back_populates='student', passive_deletes=True)
    assigned_certificates: Mapped[list['Certificate']] = relationship('Certificate', foreign_keys='[Certificate.assigned_by]', back_populates='assigner')
    promo_codes: Mapped[list['PromoCode']] = relationship('PromoCode', foreign_keys='[PromoCode.student_id]', back_populates='student', passive_deletes=True)


class UserSession(Base):
    __tablename__ = 'user_sessions'
    __table_args__ = (
        ForeignKeyConstraint(['user_id'], ['user.id'], ondelete='CASCADE', name='user_sessions_user_id_fkey'),
        PrimaryKeyConstraint('id', name='user_sessions_pkey'),
        UniqueConstraint('token', name='user_sessions_token_key'),
        Index('idx_user_sessions_user', 'user_id'),
    )

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id: Mapped[uuid.UUID] = mapped_column(Uuid, nullable=False)
    token: Mapped[str] = mapped_column(String, nullable=False)
    created_at: Mapped[datetime.datetime] = mapped_column(DateTime, nullable=False, default=get_now)
    last_seen_at: Mapped[datetime.datetime] = mapped_column(DateTime, nullable=False, default=get_now)
    expires_at: Mapped[datetime.datetime] = mapped_column(DateTime, nullable=False)
    ended_at: Mapped[Optional[datetime.datetime]] = mapped_column(DateTime)

    user: Mapped['User'] = relationship('User', back_populates='sessions')


class Course(Base):
    __tablename__ = 'course'
    __table_args__ = (
        ForeignKeyConstraint(['user_id'], ['user.id'], ondelete='CASCADE', name='course_user_id_fkey'),
        PrimaryKeyConstraint('id', name='course_pkey'),
        Index('idx_course_targets', 'target_curriculum', 'target_grade', 'target_level'),
    )

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id: Mapped[uuid.UUID] = mapped_column(Uuid, nullable=False)
    title: Mapped[str] = mapped_column(Text, nullable=False)
    description: Mapped[Optional[str]] = mapped_column(Text)
    image_url: Mapped[Optional[str]] = mapped_column(Text)
    price: Mapped[decimal.Decimal] = mapped_column(Numeric(12, 2), nullable=False, default=decimal.Decimal('0'), server_default=text('0'))
    is_free: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False, server_default=text('false'))
    is_published: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False, server_default=text('false'))
    target_curriculum: Mapped[Optional[str]] = mapped_column(String)
    target_grade: Mapped[Optional[str]] = mapped_column(String)
    target_level: Mapped[Optional[str]] = mapped_column(String)
    target_language: Mapped[Optional[str]] = mapped_column(String)
    created_at: Mapped[datetime.datetime] = mapped_column(DateTime, nullable=False, default=get_now)
    updated_at: Mapped[datetime.datetime] = mapped_column(DateTime, nullable=False, default=get_now, onupdate=get_now)

    owner: Mapped['User'] = relationship('User', back_populates='courses')
    chapters: Mapped[list['Chapter']] = relationship('Chapter', back_populates='course', passive_deletes=True)
    attachments: Mapped[list['Attachment']] = relationship('Attachment', back_populates='course', passive_deletes=True)
    quizzes: Mapped[list['Quiz']] = relationship('Quiz', back_populates='course', passive_deletes=True)
    live_streams: Mapped[list['LiveStream']] = relationship('LiveStream', back_populates='course', passive_deletes=True)
    purchases: Mapped[list['Purchase']] = relationship('Purchase', back_populates='course', passive_deletes=True)
    timetables: Mapped[list['Timetable']] = relationship('Timetable', back_populates='course', passive_deletes=True)


class Chapter(Base):
    __tablename__ = 'chapter'
    __table_args__ = (
        ForeignKeyConstraint(['course_id'], ['course.id'], ondelete='CASCADE', name='chapter_course_id_fkey'),
        PrimaryKeyConstraint('id', name='chapter_pkey'),
        Index('idx_chapter_course_position', 'course_id', 'position'),
    )

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    course_id: Mapped[uuid.UUID] = mapped_column(Uuid, nullable=False)
    title: Mapped[str] = mapped_column(Text, nullable=False)
    description: Mapped[Optional[str]] = mapped_column(Text)
    video_url: Mapped[Optional[str]] = mapped_column(Text)
    position: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    is_published: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False, server_default=text('false'))
    is_free: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False, server_default=text('false'))
    created_at: Mapped[datetime.datetime] = mapped_column(DateTime, nullable=False, default=get_now)
    updated_at: Mapped[datetime.datetime] = mapped_column(DateTime, nullable=False, default=get_now, onupdate=get_now)

    course: Mapped['Course'] = relationship('Course', back_populates='chapters')
    user_progress: Mapped[list['UserProgress']] = relationship('UserProgress', back_populates='chapter', passive_deletes=True)


class Attachment(Base):
    __tablename__ = 'attachment'
    __table_args__ = (
        ForeignKeyConstraint(['course_id'], ['course.id'], ondelete='CASCADE', name='attachment_course_id_fkey'),
        PrimaryKeyConstraint('id', name='attachment_pkey'),
    )

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    course_id: Mapped[uuid.UUID] = mapped_column(Uuid, nullable=False)
    name: Mapped[str] = mapped_column(Text, nullable=False)
    url: Mapped[str] = mapped_column(Text, nullable=False)
    created_at: Mapped[datetime.datetime] = mapped_column(DateTime, nullable=False, default=get_now)

    course: Mapped['Course'] = relationship('Course', back_populates='attachments')


class UserProgress(Base):
    __tablename__ = 'user_progress'
    __table_args__ = (
        ForeignKeyConstraint(['chapter_id'], ['chapter.id'], ondelete='CASCADE', name='user_progress_chapter_id_fkey'),
        ForeignKeyConstraint(['user_id'], ['user.id'], ondelete='CASCADE', name='user_progress_user_id_fkey'),
        PrimaryKeyConstraint('id', name='user_progress_pkey'),
        UniqueConstraint('user_id', 'chapter_id', name='user_progress_user_chapter_key'),
    )

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id: Mapped[uuid.UUID] = mapped_column(Uuid, nullable=False)
    chapter_id: Mapped[uuid.UUID] = mapped_column(Uuid, nullable=False)
    is_completed: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False, server_default=text('false'))
    created_at: Mapped[datetime.datetime] = mapped_column(DateTime, nullable=False, default=get_now)
    updated_at: Mapped[datetime.datetime] = mapped_column(DateTime, nullable=False, default=get_now, onupdate=get_now)

    user: Mapped['User'] = relationship('User', back_populates='user_progress')
    chapter: Mapped['Chapter'] = relationship('Chapter', back_populates='user_progress')


class HomeworkSubmission(Base):
    __tablename__ = 'homework_submission'
    __table_args__ = (
        ForeignKeyConstraint(['chapter_id'], ['chapter.id'], ondelete='CASCADE', name='homework_submission_chapter_id_fkey'),
        ForeignKeyConstraint(['student_id'], ['user.id'], ondelete='CASCADE', name='homework_submission_student_id_fkey'),
        PrimaryKeyConstraint('id', name='homework_submission_pkey'),
        UniqueConstraint('student_id', 'chapter_id', name='homework_submission_student_chapter_key'),
        Index('idx_homework_submission_chapter', 'chapter_id'),
    )

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    student_id: Mapped[uuid.UUID] = mapped_column(Uuid, nullable=False)
    chapter_id: Mapped[uuid.UUID] = mapped_column(Uuid, nullable=False)
    image_url: Mapped[str] = mapped_column(Text, nullable=False)
    corrected_image_urls: Mapped[Optional[Any]] = mapped_column(JSON)
    created_at: Mapped[datetime.datetime] = mapped_column(DateTime, nullable=False, default=get_now)
    updated_at: Mapped[datetime.datetime] = mapped_column(DateTime, nullable=False, default=get_now, onupdate=get_now)


class Activity(Base):
    __tablename__ = 'activity'
    __table_args__ = (
        ForeignKeyConstraint(['chapter_id'], ['chapter.id'], ondelete='CASCADE', name='activity_chapter_id_fkey'),
        PrimaryKeyConstraint('id', name='activity_pkey'),
        Index('idx_activity_chapter', 'chapter_id'),
    )

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    chapter_id: Mapped[uuid.UUID] = mapped_column(Uuid, nullable=False)
    title: Mapped[str] = mapped_column(Text, nullable=False)
    description: Mapped[Optional[str]] = mapped_column(Text)
    is_required: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True, server_default=text('true'))
    created_at: Mapped[datetime.datetime] = mapped_column(DateTime, nullable=False, default=get_now)
    updated_at: Mapped[datetime.datetime] = mapped_column(DateTime, nullable=False, default=get_now, onupdate=get_now)


class ActivitySubmission(Base):
    __tablename__ = 'activity_submission'
    __table_args__ = (
        ForeignKeyConstraint(['activity_id'], ['activity.id'], ondelete='CASCADE', name='activity_submission_activity_id_fkey'),
        ForeignKeyConstraint(['student_id'], ['user.id'], ondelete='CASCADE', name='activity_submission_student_id_fkey'),
        PrimaryKeyConstraint('id', name='activity_submission_pkey'),
        UniqueConstraint('student_id', 'activity_id', name='activity_submission_student_activity_key'),
    )

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    student_id: Mapped[uuid.UUID] = mapped_column(Uuid, nullable=False)
    activity_id: Mapped[uuid.UUID] = mapped_column(Uuid, nullable=False)
    image_url: Mapped[str] = mapped_column(Text, nullable=False)
    created_at: Mapped[datetime.datetime] = mapped_column(DateTime, nullable=False, default=get_now)
    updated_at: Mapped[datetime.datetime] = mapped_column(DateTime, nullable=False, default=get_now, onupdate=get_now)


class Quiz(Base):
    __tablename__ = 'quiz'
    __table_args__ = (
        CheckConstraint('max_attempts >= 1', name='quiz_max_attempts_check'),
        ForeignKeyConstraint(['course_id'], ['course.id'], ondelete='CASCADE', name='quiz_course_id_fkey'),
        PrimaryKeyConstraint('id', name='quiz_pkey'),
        Index('idx_quiz_course_position', 'course_id', 'position'),
    )

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    course_id: Mapped[uuid.UUID] = mapped_column(Uuid, nullable=False)
    title: Mapped[str] = mapped_column(Text, nullable=False)
    description: Mapped[Optional[str]] = mapped_column(Text)
    position: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    is_published: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False, server_default=text('false'))
    max_attempts: Mapped[int] = mapped_column(Integer, nullable=False, default=1, server_default=text('1'))
    timer: Mapped[Optional[int]] = mapped_column(Integer)
    created_at: Mapped[datetime.datetime] = mapped_column(DateTime, nullable=False, default=get_now)
    updated_at: Mapped[datetime.datetime] = mapped_column(DateTime, nullable=False, default=get_now, onupdate=get_now)

    course: Mapped['Course'] = relationship('Course', back_populates='quizzes')
    questions: Mapped[list['Question']] = relationship('Question', back_populates='quiz', order_by='Question.position', passive_deletes=True)
    quiz_results: Mapped[list['QuizResult']] = relationship('QuizResult', back_populates='quiz', passive_deletes=True)


class Question(Base):
    __tablename__ = 'question'
    __table_args__ = (
        CheckConstraint("type IN ('MULTIPLE_CHOICE', 'TRUE_FALSE', 'SHORT_ANSWER')", name='question_type_check'),
        ForeignKeyConstraint(['quiz_id'], ['quiz.id'], ondelete='CASCADE', name='question_quiz_id_fkey'),
        PrimaryKeyConstraint('id', name='question_pkey'),
    )

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    quiz_id: Mapped[uuid.UUID] = mapped_column(Uuid, nullable=False)
    text_: Mapped[str] = mapped_column('text', Text, nullable=False)
    type: Mapped[str] = mapped_column(String, nullable=False)
    options: Mapped[Optional[Any]] = mapped_column(JSON)
    correct_answer: Mapped[str] = mapped_column(Text, nullable=False)
    points: Mapped[int] = mapped_column(Integer, nullable=False, default=1, server_default=text('1'))
    image_url: Mapped[Optional[str]] = mapped_column(Text)
    position: Mapped[int] = mapped_column(Integer, nullable=False, default=1)

    quiz: Mapped['Quiz'] = relationship('Quiz', back_populates='questions')
    answers: Mapped[list['QuizAnswer']] = relationship('QuizAnswer', back_populates='question', passive_deletes=True)


class QuizResult(Base):
    __tablename__ = 'quiz_result'
    __table_args__ = (
        ForeignKeyConstraint(['quiz_id'], ['quiz.id'], ondelete='CASCADE', name='quiz_result_quiz_id_fkey'),
        ForeignKeyConstraint(['student_id'], ['user.id'], ondelete='CASCADE', name='quiz_result_student_id_fkey'),
        PrimaryKeyConstraint('id', name='quiz_result_pkey'),
        UniqueConstraint('student_id', 'quiz_id', 'attempt_number', name='quiz_result_attempt_key'),
    )

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    student_id: Mapped[uuid.UUID] = mapped_column(Uuid, nullable=False)
    quiz_id: Mapped[uuid.UUID] = mapped_column(Uuid, nullable=False)
    score: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    total_points: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    percentage: Mapped[float] = mapped_column(Numeric(5, 2, asdecimal=False), nullable=False, default=0)
    attempt_number: Mapped[int] = mapped_column(Integer, nullable=False, default=1)
    submitted_at: Mapped[datetime.datetime] = mapped_column(DateTime, nullable=False, default=get_now)
    created_at: Mapped[datetime.datetime] = mapped_column(DateTime, nullable=False, default=get_now)

    student: Mapped['User'] = relationship('User', back_populates='quiz_results')
    quiz: Mapped['Quiz'] = relationship('Quiz', back_populates='quiz_results')
    answers: Mapped[list['QuizAnswer']] = relationship('QuizAnswer', back_populates='quiz_result', passive_deletes=True)


class QuizAnswer(Base):
    __tablename__ = 'quiz_answer'
    __table_args__ = (
        ForeignKeyConstraint(['question_id'], ['question.id'], ondelete='CASCADE', name='quiz_answer_question_id_fkey'),
        ForeignKeyConstraint(['quiz_result_id'], ['quiz_result.id'], ondelete='CASCADE', name='quiz_answer_quiz_result_id_fkey'),
        PrimaryKeyConstraint('id', name='quiz_answer_pkey'),
    )

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    quiz_result_id: Mapped[uuid.UUID] = mapped_column(Uuid, nullable=False)
    question_id: Mapped[uuid.UUID] = mapped_column(Uuid, nullable=False)
    student_answer: Mapped[Optional[str]] = mapped_column(Text)
    correct_answer: Mapped[str] = mapped_column(Text, nullable=False)
    is_correct: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    points_obtained: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    quiz_result: Mapped['QuizResult'] = relationship('QuizResult', back_populates='answers')
    question: Mapped['Question'] = relationship('Question', back_populates='answers')


class PromoCode(Base):
    __tablename__ = 'promo_code'
    __table_args__ = (
        CheckConstraint("status IN ('requested', 'approved')", name='promo_code_status_check'),
        ForeignKeyConstraint(['student_id'], ['user.id'], ondelete='CASCADE', name='promo_code_student_id_fkey'),
        ForeignKeyConstraint(['created_by'], ['user.id'], ondelete='SET NULL', name='promo_code_created_by_fkey'),
        PrimaryKeyConstraint('id', name='promo_code_pkey'),
        UniqueConstraint('code', name='promo_code_code_key'),
    )

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    student_id: Mapped[uuid.UUID] = mapped_column(Uuid, nullable=False)
    created_by: Mapped[Optional[uuid.UUID]] = mapped_column(Uuid)
    code: Mapped[Optional[str]] = mapped_column(String)
    discount_percentage: Mapped[Optional[int]] = mapped_column(Integer)
    status: Mapped[str] = mapped_column(String, nullable=False, default='requested')
    is_used: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False, server_default=text('false'))
    requested_at: Mapped[datetime.datetime] = mapped_column(DateTime, nullable=False, default=get_now)
    created_at: Mapped[datetime.datetime] = mapped_column(DateTime, nullable=False, default=get_now)

    student: Mapped['User'] = relationship('User', foreign_keys=[student_id], back_populates='promo_codes')


class Purchase(Base):
    __tablename__ = 'purchase'
    __table_args__ = (
        CheckConstraint("status IN ('ACTIVE', 'INACTIVE')", name='purchase_status_check'),
        ForeignKeyConstraint(['course_id'], ['course.id'], ondelete='CASCADE', name='purchase_course_id_fkey'),
        ForeignKeyConstraint(['user_id'], ['user.id'], ondelete='CASCADE', name='purchase_user_id_fkey'),
        ForeignKeyConstraint(['promo_code_id'], ['promo_code.id'], ondelete='SET NULL', name='purchase_promo_code_id_fkey'),
        PrimaryKeyConstraint('id', name='purchase_pkey'),
        UniqueConstraint('user_id', 'course_id', name='purchase_user_course_key'),
    )

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id: Mapped[uuid.UUID] = mapped_column(Uuid, nullable=False)
    course_id: Mapped[uuid.UUID] = mapped_column(Uuid, nullable=False)
    status: Mapped[str] = mapped_column(String, nullable=False, default='ACTIVE')
    price_paid: Mapped[Optional[decimal.Decimal]] = mapped_column(Numeric(12, 2))
    promo_code_id: Mapped[Optional[uuid.UUID]] = mapped_column(Uuid)
    created_at: Mapped[datetime.datetime] = mapped_column(DateTime, nullable=False, default=get_now)
    updated_at: Mapped[datetime.datetime] = mapped_column(DateTime, nullable=False, default=get_now, onupdate=get_now)

    user: Mapped['User'] = relationship('User', back_populates='purchases')
    course: Mapped['Course'] = relationship('Course', back_populates='purchases')


class BalanceTransaction(Base):
    __tablename__ = 'balance_transaction'
    __table_args__ = (
        CheckConstraint("type IN ('ADJUSTMENT', 'PURCHASE')", name='balance_transaction_type_check'),
        ForeignKeyConstraint(['user_id'], ['user.id'], ondelete='CASCADE', name='balance_transaction_user_id_fkey'),
        ForeignKeyConstraint(['created_by'], ['user.id'], ondelete='SET NULL', name='balance_transaction_created_by_fkey'),
        PrimaryKeyConstraint('id', name='balance_transaction_pkey'),
        Index('idx_balance_transaction_user_created', 'user_id', 'created_at'),
    )

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id: Mapped[uuid.UUID] = mapped_column(Uuid, nullable=False)
    amount: Mapped[decimal.Decimal] = mapped_column(Numeric(12, 2), nullable=False)
    balance_after: Mapped[decimal.Decimal] = mapped_column(Numeric(12, 2), nullable=False)
    type: Mapped[str] = mapped_column(String, nullable=False)
    description: Mapped[Optional[str]] = mapped_column(Text)
    created_by: Mapped[Optional[uuid.UUID]] = mapped_column(Uuid)
    created_at: Mapped[datetime.datetime] = mapped_column(DateTime, nullable=False, default=get_now)

    user: Mapped['User'] = relationship('User', foreign_keys=[user_id], back_populates='balance_transactions')


class SubscriptionPlan(Base):
    __tablename__ = 'subscription_plan'
    __table_args__ = (
        CheckConstraint('duration > 0', name='subscription_plan_duration_check'),
        PrimaryKeyConstraint('id', name='subscription_plan_pkey'),
    )

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    name: Mapped[str] = mapped_column(Text, nullable=False)
    description: Mapped[Optional[str]] = mapped_column(Text)
    price: Mapped[decimal.Decimal] = mapped_column(Numeric(12, 2), nullable=False, default=decimal.Decimal('0'))
    duration: Mapped[int] = mapped_column(Integer, nullable=False)
    curriculum: Mapped[Optional[str]] = mapped_column(String)
    grade: Mapped[Optional[str]] = mapped_column(String)
    level: Mapped[Optional[str]] = mapped_column(String)
    language: Mapped[Optional[str]] = mapped_column(String)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True, server_default=text('true'))
    created_at: Mapped[datetime.datetime] = mapped_column(DateTime, nullable=False, default=get_now)
    updated_at: Mapped[datetime.datetime] = mapped_column(DateTime, nullable=False, default=get_now, onupdate=get_now)

    subscriptions: Mapped[list['Subscription']] = relationship('Subscription', back_populates='plan', passive_deletes=True)


class Subscription(Base):
    __tablename__ = 'subscription'
    __table_args__ = (
        CheckConstraint("status IN ('PENDING', 'APPROVED', 'ACTIVE', 'DENIED', 'EXPIRED')", name='subscription_status_check'),
        ForeignKeyConstraint(['plan_id'], ['subscription_plan.id'], name='subscription_plan_id_fkey'),
        ForeignKeyConstraint(['user_id'], ['user.id'], ondelete='CASCADE', name='subscription_user_id_fkey'),
        PrimaryKeyConstraint('id', name='subscription_pkey'),
        Index('idx_subscription_user_status', 'user_id', 'status'),
    )

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id: Mapped[uuid.UUID] = mapped_column(Uuid, nullable=False)
    plan_id: Mapped[uuid.UUID] = mapped_column(Uuid, nullable=False)
    status: Mapped[str] = mapped_column(String, nullable=False, default='PENDING')
    start_date: Mapped[Optional[datetime.datetime]] = mapped_column(DateTime)
    end_date: Mapped[Optional[datetime.datetime]] = mapped_column(DateTime)
    created_at: Mapped[datetime.datetime] = mapped_column(DateTime, nullable=False, default=get_now)
    updated_at: Mapped[datetime.datetime] = mapped_column(DateTime, nullable=False, default=get_now, onupdate=get_now)

    user: Mapped['User'] = relationship('User', back_populates='subscriptions')
    plan: Mapped['SubscriptionPlan'] = relationship('SubscriptionPlan', back_populates='subscriptions')
    request: Mapped[Optional['SubscriptionRequest']] = relationship('SubscriptionRequest', uselist=False, back_populates='subscription', passive_deletes=True)


class SubscriptionRequest(Base):
    __tablename__ = 'subscription_request'
    __table_args__ = (
        CheckConstraint("status IN ('PENDING', 'APPROVED', 'DENIED')", name='subscription_request_status_check'),
        ForeignKeyConstraint(['subscription_id'], ['subscription.id'], ondelete='CASCADE', name='subscription_request_subscription_id_fkey'),
        ForeignKeyConstraint(['reviewed_by'], ['user.id'], ondelete='SET NULL', name='subscription_request_reviewed_by_fkey'),
        PrimaryKeyConstraint('id', name='subscription_request_pkey'),
        UniqueConstraint('subscription_id', name='subscription_request_subscription_id_key'),
    )

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    subscription_id: Mapped[uuid.UUID] = mapped_column(Uuid, nullable=False)
    transaction_image: Mapped[str] = mapped_column(Text, nullable=False)
    status: Mapped[str] = mapped_column(String, nullable=False, default='PENDING')
    reviewed_by: Mapped[Optional[uuid.UUID]] = mapped_column(Uuid)
    reviewed_at: Mapped[Optional[datetime.datetime]] = mapped_column(DateTime)
    created_at: Mapped[datetime.datetime] = mapped_column(DateTime, nullable=False, default=get_now)

    subscription: Mapped['Subscription'] = relationship('Subscription', back_populates='request')


class LiveStream(Base):
    __tablename__ = 'live_stream'
    __table_args__ = (
        CheckConstraint('duration > 0', name='live_stream_duration_check'),
        ForeignKeyConstraint(['course_id'], ['course.id'], ondelete='CASCADE', name='live_stream_course_id_fkey'),
        ForeignKeyConstraint(['created_by'], ['user.id'], ondelete='SET NULL', name='live_stream_created_by_fkey'),
        PrimaryKeyConstraint('id', name='live_stream_pkey'),
        Index('idx_live_stream_course_position', 'course_id', 'position'),
    )

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    course_id: Mapped[uuid.UUID] = mapped_column(Uuid, nullable=False)
    created_by: Mapped[Optional[uuid.UUID]] = mapped_column(Uuid)
    title: Mapped[str] = mapped_column(Text, nullable=False)
    description: Mapped[Optional[str]] = mapped_column(Text)
    meeting_url: Mapped[str] = mapped_column(Text, nullable=False)
    meeting_id: Mapped[Optional[str]] = mapped_column(String)
    meeting_password: Mapped[Optional[str]] = mapped_column(String)
    scheduled_at: Mapped[datetime.datetime] = mapped_column(DateTime, nullable=False)
    duration: Mapped[int] = mapped_column(Integer, nullable=False, default=60)
    position: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    is_published: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False, server_default=text('false'))
    created_at: Mapped[datetime.datetime] = mapped_column(DateTime, nullable=False, default=get_now)
    updated_at: Mapped[datetime.datetime] = mapped_column(DateTime, nullable=False, default=get_now, onupdate=get_now)

    course: Mapped['Course'] = relationship('Course', back_populates='live_streams')
    attendances: Mapped[list['LiveStreamAttendance']] = relationship('LiveStreamAttendance', back_populates='live_stream', passive_deletes=True)


class LiveStreamAttendance(Base):
    __tablename__ = 'live_stream_attendance'
    __table_args__ = (
        ForeignKeyConstraint(['live_stream_id'], ['live_stream.id'], ondelete='CASCADE', name='live_stream_attendance_live_stream_id_fkey'),
        ForeignKeyConstraint(['user_id'], ['user.id'], ondelete='CASCADE', name='live_stream_attendance_user_id_fkey'),
        PrimaryKeyConstraint('id', name='live_stream_attendance_pkey'),
        UniqueConstraint('live_stream_id', 'user_id', name='live_stream_attendance_key'),
    )

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    live_stream_id: Mapped[uuid.UUID] = mapped_column(Uuid, nullable=False)
    user_id: Mapped[uuid.UUID] = mapped_column(Uuid, nullable=False)
    joined_at: Mapped[datetime.datetime] = mapped_column(DateTime, nullable=False, default=get_now)

    live_stream: Mapped['LiveStream'] = relationship('LiveStream', back_populates='attendances')


class Timetable(Base):
    __tablename__ = 'timetable'
    __table_args__ = (
        CheckConstraint('day_of_week BETWEEN 0 AND 6', name='timetable_day_of_week_check'),
        ForeignKeyConstraint(['course_id'], ['course.id'], ondelete='CASCADE', name='timetable_course_id_fkey'),
        PrimaryKeyConstraint('id', name='timetable_pkey'),
        Index('idx_timetable_day_start', 'day_of_week', 'start_time'),
    )

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    course_id: Mapped[uuid.UUID] = mapped_column(Uuid, nullable=False)
    day_of_week: Mapped[int] = mapped_column(Integer, nullable=False)
    start_time: Mapped[str] = mapped_column(String(5), nullable=False)
    end_time: Mapped[str] = mapped_column(String(5), nullable=False)
    title: Mapped[str] = mapped_column(Text, nullable=False)
    description: Mapped[Optional[str]] = mapped_column(Text)
    created_at: Mapped[datetime.datetime] = mapped_column(DateTime, nullable=False, default=get_now)
    updated_at: Mapped[datetime.datetime] = mapped_column(DateTime, nullable=False, default=get_now, onupdate=get_now)

    course: Mapped['Course'] = relationship('Course', back_populates='timetables')


class Certificate(Base):
    __tablename__ = 'certificate'
    __table_args__ = (
        ForeignKeyConstraint(['student_id'], ['user.id'], ondelete='CASCADE', name='certificate_student_id_fkey'),
        ForeignKeyConstraint(['assigned_by'], ['user.id'], ondelete='SET NULL', name='certificate_assigned_by_fkey'),
        PrimaryKeyConstraint('id', name='certificate_pkey'),
    )

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    student_id: Mapped[uuid.UUID] = mapped_column(Uuid, nullable=False)
    assigned_by: Mapped[Optional[uuid.UUID]] = mapped_column(Uuid)
    image_url: Mapped[str] = mapped_column(Text, nullable=False)
    title: Mapped[Optional[str]] = mapped_column(Text)
    description: Mapped[Optional[str]] = mapped_column(Text)
    created_at: Mapped[datetime.datetime] = mapped_column(DateTime, nullable=False, default=get_now)

    student: Mapped['User'] = relationship('User', foreign_keys=[student_id], back_populates='certificates')
    assigner: Mapped[Optional['User']] = relationship('User', foreign_keys=[assigned_by], back_populates='assigned_certificates')


class StudentMessage(Base):
    __tablename__ = 'student_message'
    __table_args__ = (
        ForeignKeyConstraint(['created_by'], ['user.id'], ondelete='SET NULL', name='student_message_created_by_fkey'),
        PrimaryKeyConstraint('id', name='student_message_pkey'),
        Index('idx_student_message_active_created', 'is_active', 'created_at'),
    )

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    created_by: Mapped[Optional[uuid.UUID]] = mapped_column(Uuid)
    message: Mapped[str] = mapped_column(Text, nullable=False)
    target_curriculum: Mapped[Optional[str]] = mapped_column(String)
    target_level: Mapped[Optional[str]] = mapped_column(String)
    target_language: Mapped[Optional[str]] = mapped_column(String)
    target_grade: Mapped[Optional[str]] = mapped_column(String)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True, server_default=text('true'))
    created_at: Mapped[datetime.datetime] = mapped_column(DateTime, nullable=False, default=get_now)
